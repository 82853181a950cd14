"""Platform, market and voice catalogs used to parameterize generation."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class PlatformScope(str, Enum):
    """Market reach of a selling platform."""

    DOMESTIC = "domestic"
    GLOBAL = "global"


@dataclass(frozen=True)
class PlatformProfile:
    """A selling platform the script is written for."""

    value: str
    label: str
    scope: PlatformScope

    @property
    def is_domestic(self) -> bool:
        return self.scope is PlatformScope.DOMESTIC


@dataclass(frozen=True)
class MarketProfile:
    """A target market: language and cultural context for the script."""

    value: str
    label: str
    language: str
    culture: str


DOMESTIC_MARKET = "CN"
DEFAULT_GLOBAL_MARKET = "US"

PLATFORMS: tuple[PlatformProfile, ...] = (
    PlatformProfile("tiktok", "TikTok", PlatformScope.GLOBAL),
    PlatformProfile("amazon", "Amazon", PlatformScope.GLOBAL),
    PlatformProfile("temu", "Temu", PlatformScope.GLOBAL),
    PlatformProfile("aliexpress", "AliExpress", PlatformScope.GLOBAL),
    PlatformProfile("shopee", "Shopee", PlatformScope.GLOBAL),
    PlatformProfile("douyin", "抖音 (Douyin)", PlatformScope.DOMESTIC),
    PlatformProfile("taobao", "淘宝 (Taobao)", PlatformScope.DOMESTIC),
    PlatformProfile("tmall", "天猫 (Tmall)", PlatformScope.DOMESTIC),
    PlatformProfile("jd", "京东 (JD)", PlatformScope.DOMESTIC),
    PlatformProfile("pdd", "拼多多 (Pinduoduo)", PlatformScope.DOMESTIC),
)

TARGET_MARKETS: tuple[MarketProfile, ...] = (
    MarketProfile("US", "United States", "English", "Direct, benefit-driven, diverse casting, lifestyle aspiration"),
    MarketProfile("UK", "United Kingdom", "English", "Understated humour, quality and value conscious"),
    MarketProfile("JP", "Japan", "Japanese", "Detail-oriented, kawaii or minimal aesthetics, politeness, trust in craftsmanship"),
    MarketProfile("KR", "South Korea", "Korean", "Trend-driven, K-beauty aesthetics, fast-paced editing"),
    MarketProfile("TH", "Thailand", "Thai", "Warm, playful, celebrity and influencer driven"),
    MarketProfile("VN", "Vietnam", "Vietnamese", "Youthful, price sensitive, energetic social commerce"),
    MarketProfile("ID", "Indonesia", "Indonesian", "Community oriented, modest fashion awareness, value seeking"),
    MarketProfile("DE", "Germany", "German", "Precision, specifications and reliability over hype"),
    MarketProfile("FR", "France", "French", "Elegance, style and lifestyle storytelling"),
    MarketProfile("ES", "Spain", "Spanish", "Expressive, social and family oriented"),
    MarketProfile(DOMESTIC_MARKET, "中国 (China)", "Chinese", "Livestream commerce culture, fast hooks, trending slang, value and quality proof"),
)

STYLE_SHORT_FORM = "Style: Fast-paced, high-energy, strong hook in first 3 seconds, entertainment-focused."
STYLE_PROFESSIONAL = "Style: Professional, feature-focused, clear demonstration, trust-building, problem/solution structure."
STYLE_VALUE = "Style: Value-focused, discount-emphasized, urgent call to action, viral gadget style."

PLATFORM_STYLES = {
    "douyin": STYLE_SHORT_FORM,
    "tiktok": STYLE_SHORT_FORM,
    "amazon": STYLE_PROFESSIONAL,
    "jd": STYLE_PROFESSIONAL,
    "tmall": STYLE_PROFESSIONAL,
    "taobao": STYLE_PROFESSIONAL,
    "temu": STYLE_VALUE,
    "pdd": STYLE_VALUE,
    "aliexpress": STYLE_VALUE,
}

# Gemini prebuilt TTS voices
VOICE_OPTIONS: tuple[str, ...] = ("Kore", "Puck", "Charon", "Fenrir", "Zephyr", "Aoede")
DEFAULT_VOICE = "Kore"


def find_platform(value: str | None) -> PlatformProfile:
    """Look up a platform, defaulting to the first catalog entry."""
    for platform in PLATFORMS:
        if platform.value == value:
            return platform
    logger.debug(f"Unknown platform {value!r}, using {PLATFORMS[0].value}")
    return PLATFORMS[0]


def find_market(value: str | None) -> MarketProfile:
    """Look up a market, defaulting to the first catalog entry."""
    for market in TARGET_MARKETS:
        if market.value == value:
            return market
    logger.debug(f"Unknown market {value!r}, using {TARGET_MARKETS[0].value}")
    return TARGET_MARKETS[0]


def resolve_market(platform: PlatformProfile, requested: str | None) -> MarketProfile:
    """Resolve the effective market for a platform.

    Domestic platforms always target the domestic market. Global platforms
    never do; a domestic request on a global platform falls back to the
    default global market.
    """
    if platform.is_domestic:
        return find_market(DOMESTIC_MARKET)
    if requested == DOMESTIC_MARKET:
        logger.info(
            f"Platform {platform.value} is global, replacing market {DOMESTIC_MARKET} "
            f"with {DEFAULT_GLOBAL_MARKET}"
        )
        return find_market(DEFAULT_GLOBAL_MARKET)
    return find_market(requested)


def style_directive(platform: PlatformProfile) -> str:
    """Video style bucket for a platform, empty when none applies."""
    return PLATFORM_STYLES.get(platform.value, "")


def validate_voice(voice_name: str | None) -> str:
    """Return the voice if it is a known prebuilt voice, else the default."""
    if voice_name in VOICE_OPTIONS:
        return voice_name
    return DEFAULT_VOICE
