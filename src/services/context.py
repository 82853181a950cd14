"""Per-call generation context threaded into every orchestrator."""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from services.genai_client import GenAIClient
from utils.retry import INITIAL_RETRY_DELAY_MS, MAX_RETRIES, with_retry

T = TypeVar("T")


@dataclass(frozen=True)
class ModelConfig:
    """Gemini model names for each call site."""

    analysis: str = "gemini-3-pro-preview"
    analysis_fallback: str = "gemini-2.5-flash"
    image: str = "gemini-3-pro-image-preview"
    image_fallback: str = "gemini-2.5-flash-image"
    tts: str = "gemini-2.5-flash-preview-tts"
    verify: str = "gemini-2.5-flash"

    @classmethod
    def from_config(cls, config: dict) -> "ModelConfig":
        defaults = cls()
        return cls(
            analysis=config.get("analysis_model") or defaults.analysis,
            analysis_fallback=config.get("analysis_fallback_model") or defaults.analysis_fallback,
            image=config.get("image_model") or defaults.image,
            image_fallback=config.get("image_fallback_model") or defaults.image_fallback,
            tts=config.get("tts_model") or defaults.tts,
            verify=config.get("verify_model") or defaults.verify,
        )


@dataclass
class StudioContext:
    """Resolved client plus the policies a generation call runs under."""

    client: GenAIClient
    models: ModelConfig = field(default_factory=ModelConfig)
    max_retries: int = MAX_RETRIES
    initial_retry_delay_ms: int = INITIAL_RETRY_DELAY_MS
    tts_sample_rate: int = 24000
    max_reference_images: int = 5
    rng: random.Random = field(default_factory=random.Random)
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep

    async def call(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run a remote call under this context's retry policy."""
        return await with_retry(
            operation,
            max_retries=self.max_retries,
            initial_delay_ms=self.initial_retry_delay_ms,
            sleep=self.sleep,
        )
