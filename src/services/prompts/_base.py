"""Base utilities for prompts module.

Contains shared helper functions used across prompt modules.
"""

import re

_FENCE_OPEN = re.compile(r"```json\s*", re.IGNORECASE)


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code fences from AI response text.

    Fences are removed wherever they appear, not only at the ends, since
    models occasionally wrap a JSON body in prose plus a fenced block.

    Args:
        text: Raw text that may contain markdown code blocks

    Returns:
        Cleaned text with markdown code fences removed
    """
    text = _FENCE_OPEN.sub("", text)
    return text.replace("```", "").strip()
