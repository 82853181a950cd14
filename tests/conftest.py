"""Shared pytest fixtures for studio core tests."""

import base64
import random
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


class FakeAPIError(Exception):
    """Stand-in for a google-genai APIError (code + message)."""

    def __init__(self, code: int | None, message: str, status: str | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        if status is not None:
            self.status = status


def make_response(text: str | None = None, inline: bytes | str | None = None):
    """Build a generate_content response shaped like the SDK's."""
    parts = []
    if inline is not None:
        parts.append(
            SimpleNamespace(
                text=None,
                inline_data=SimpleNamespace(data=inline, mime_type="application/octet-stream"),
            )
        )
    candidates = [SimpleNamespace(content=SimpleNamespace(parts=parts))] if parts else []
    return SimpleNamespace(text=text, candidates=candidates)


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def response_factory():
    """Factory for SDK-shaped responses."""
    return make_response


@pytest.fixture
def api_error():
    """Factory for SDK-shaped API errors."""
    return FakeAPIError


@pytest.fixture
def fake_genai():
    """Mock google.genai Client with an async generate_content."""
    client = Mock()
    client.aio.models.generate_content = AsyncMock()
    return client


@pytest.fixture
def sleeps():
    """Records backoff sleeps instead of waiting."""
    return []


@pytest.fixture
def studio_context(fake_genai, sleeps):
    """StudioContext around the fake client with recorded, instant sleeps."""
    from services.context import StudioContext
    from services.genai_client import GenAIClient

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return StudioContext(
        client=GenAIClient(fake_genai),
        rng=random.Random(7),
        sleep=fake_sleep,
    )


@pytest.fixture
def sample_config() -> dict:
    """Sample configuration for testing."""
    return {
        "gemini_api_key": "test_gemini_key",
        "analysis_model": "gemini-3-pro-preview",
        "analysis_fallback_model": "gemini-2.5-flash",
        "image_model": "gemini-3-pro-image-preview",
        "image_fallback_model": "gemini-2.5-flash-image",
        "tts_model": "gemini-2.5-flash-preview-tts",
        "verify_model": "gemini-2.5-flash",
        "max_retries": 3,
        "initial_retry_delay_ms": 2000,
        "tts_sample_rate": 24000,
        "max_reference_images": 5,
        "log_level": "INFO",
        "log_json": False,
    }


@pytest.fixture
def sample_scene_dict() -> dict:
    """One scene as returned by the analysis model."""
    return {
        "id": "1",
        "visual": "一位年轻女性在厨房里拿着保温杯",
        "visual_en": "A young Chinese woman holding a sleek thermos in a bright kitchen",
        "action": "她拧开杯盖，热气升起",
        "action_en": "She twists the lid open and steam rises",
        "camera": "缓慢推近",
        "camera_en": "Slow dolly-in",
        "dialogue": "Keeps your coffee hot for 12 hours!",
        "dialogue_cn": "咖啡保温12小时！",
    }


@pytest.fixture
def sample_product():
    """Product with four images on TikTok."""
    from models.product import ProductInput

    return ProductInput(
        images=[b64(f"image-{i}".encode()) for i in range(4)],
        title="Thermo Mug Pro",
        description="Vacuum insulated stainless steel mug",
        creative_ideas="Morning routine",
        platform="tiktok",
        target_market="US",
    )
