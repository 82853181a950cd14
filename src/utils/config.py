"""Configuration loading and validation for the studio core."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")

MAX_REFERENCE_IMAGES = 5


def load_config() -> dict:
    """Load configuration from environment variables."""
    config = {
        # Optional at load time: the credential provider may supply a key later
        "gemini_api_key": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
        # Model configurations
        "analysis_model": os.getenv("GEMINI_MODEL_ANALYSIS", "gemini-3-pro-preview"),
        "analysis_fallback_model": os.getenv("GEMINI_MODEL_ANALYSIS_FALLBACK", "gemini-2.5-flash"),
        "image_model": os.getenv("GEMINI_MODEL_IMAGE", "gemini-3-pro-image-preview"),
        "image_fallback_model": os.getenv("GEMINI_MODEL_IMAGE_FALLBACK", "gemini-2.5-flash-image"),
        "tts_model": os.getenv("GEMINI_MODEL_TTS", "gemini-2.5-flash-preview-tts"),
        "verify_model": os.getenv("GEMINI_MODEL_VERIFY", "gemini-2.5-flash"),
        # Retry policy
        "max_retries": int(os.getenv("GEMINI_MAX_RETRIES", "3")),
        "initial_retry_delay_ms": int(os.getenv("GEMINI_INITIAL_RETRY_DELAY_MS", "2000")),
        # Media
        "tts_sample_rate": int(os.getenv("TTS_SAMPLE_RATE", "24000")),
        "max_reference_images": int(os.getenv("MAX_REFERENCE_IMAGES", str(MAX_REFERENCE_IMAGES))),
        # Logging
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": os.getenv("LOG_JSON", "false").lower() == "true",
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    for key in (
        "analysis_model",
        "analysis_fallback_model",
        "image_model",
        "image_fallback_model",
        "tts_model",
        "verify_model",
    ):
        if not config.get(key):
            errors.append(f"{key} must not be empty")

    if config.get("max_retries", 0) < 0:
        errors.append("GEMINI_MAX_RETRIES must be >= 0")

    if config.get("initial_retry_delay_ms", 0) <= 0:
        errors.append("GEMINI_INITIAL_RETRY_DELAY_MS must be positive")

    if config.get("tts_sample_rate", 0) <= 0:
        errors.append("TTS_SAMPLE_RATE must be positive")

    max_refs = config.get("max_reference_images", MAX_REFERENCE_IMAGES)
    if not 1 <= max_refs <= MAX_REFERENCE_IMAGES:
        errors.append(f"MAX_REFERENCE_IMAGES must be between 1 and {MAX_REFERENCE_IMAGES}")

    return errors
