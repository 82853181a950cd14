"""Prompts module - centralized prompt templates for the Gemini orchestrators.

Re-exports all prompt constants and utilities for easy importing:
    from services.prompts import strip_markdown_code_blocks
    from services.prompts import CREATIVE_DIRECTOR_V1, VEO_MANIFEST_CONVERTER_V1
"""

from services.prompts._base import strip_markdown_code_blocks
from services.prompts.script_generation import (
    CREATIVE_DIRECTOR_V1,
    DOMESTIC_ETHNICITY_RULE,
    SCRIPT_REQUEST_DETAILS,
    SCRIPT_REQUEST_V1,
    SCRIPT_REQUEST_VIDEO_CLAUSE,
    VEO_MANIFEST_CONVERTER_V1,
    VEO_MANIFEST_REQUEST,
)

# Bump when a template changes so logged prompt versions stay meaningful
PROMPT_VERSIONS = {
    "analyze_product": "v1",
    "regenerate_veo_prompt": "v1",
}

__all__ = [
    # Utilities
    "strip_markdown_code_blocks",
    # Version tracking
    "PROMPT_VERSIONS",
    # Script generation prompts
    "CREATIVE_DIRECTOR_V1",
    "DOMESTIC_ETHNICITY_RULE",
    "SCRIPT_REQUEST_V1",
    "SCRIPT_REQUEST_VIDEO_CLAUSE",
    "SCRIPT_REQUEST_DETAILS",
    # Manifest prompts
    "VEO_MANIFEST_CONVERTER_V1",
    "VEO_MANIFEST_REQUEST",
]
