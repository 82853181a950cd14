# Data models for the studio core
from .catalog import (
    DEFAULT_VOICE,
    DOMESTIC_MARKET,
    PLATFORMS,
    TARGET_MARKETS,
    VOICE_OPTIONS,
    MarketProfile,
    PlatformProfile,
    PlatformScope,
)
from .product import (
    AspectRatio,
    GenerationSettings,
    ImageResolution,
    ProductInput,
    ReferenceVideo,
    VideoMode,
)
from .storyboard import (
    AnalysisResult,
    ManifestPrompt,
    PromptInput,
    RawTextPrompt,
    SceneDraft,
    ScenePrompt,
)

__all__ = [
    # Catalogs
    "PlatformProfile",
    "PlatformScope",
    "MarketProfile",
    "PLATFORMS",
    "TARGET_MARKETS",
    "DOMESTIC_MARKET",
    "VOICE_OPTIONS",
    "DEFAULT_VOICE",
    # Product input
    "ProductInput",
    "ReferenceVideo",
    "GenerationSettings",
    "AspectRatio",
    "ImageResolution",
    "VideoMode",
    # Storyboard
    "AnalysisResult",
    "SceneDraft",
    "ScenePrompt",
    "PromptInput",
    "RawTextPrompt",
    "ManifestPrompt",
]
