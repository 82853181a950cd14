"""Studio facade: the operations the UI layer calls.

Each call resolves a client through the credential provider, builds a
StudioContext and hands it to the script or media service. Nothing is
shared between calls except the provider's user-set key.
"""

import asyncio
import random
from typing import Optional, Sequence, Union

from models.product import AspectRatio, GenerationSettings, ImageResolution, ProductInput
from models.storyboard import AnalysisResult, PromptInput, SceneDraft
from services.context import ModelConfig, StudioContext
from services.credentials import CredentialProvider, HostKeySelector
from services.media_service import MediaService
from services.script_service import ScriptService
from utils.config import load_config, validate_config
from utils.errors import ServiceError, StudioError
from utils.logging import get_logger, set_session_context, setup_logging
from utils.retry import is_quota_error

logger = get_logger(__name__)


def describe_error(error: BaseException) -> str:
    """Localized, user-facing message for a failed operation."""
    # Caller-side and parse failures keep their own message whatever their text says
    if isinstance(error, StudioError) and not isinstance(error, ServiceError):
        return error.user_message
    if is_quota_error(error):
        return "API 配额耗尽 (429): 请稍后重试。"
    if isinstance(error, StudioError):
        return error.user_message
    return f"系统错误: {str(error) or '未知错误'}"


class CreativeStudio:
    """Central entry point for product video script and media generation."""

    def __init__(
        self,
        config: Optional[dict] = None,
        credentials: Optional[CredentialProvider] = None,
        host_selector: Optional[HostKeySelector] = None,
        rng: Optional[random.Random] = None,
        sleep=asyncio.sleep,
        configure_logging: bool = False,
    ):
        """Initialize the studio with configuration.

        Args:
            config: Configuration dict (defaults to load_config())
            credentials: Credential provider (built from config when omitted)
            host_selector: Host key-selection capability for the default provider
            rng: Randomness source for voice assignment
            sleep: Awaitable sleep used for retry backoff
            configure_logging: Install the structlog handler from the
                log_level / log_json settings (for standalone use)
        """
        self.config = config or load_config()

        if configure_logging:
            setup_logging(
                self.config.get("log_level", "INFO"),
                json_output=self.config.get("log_json", False),
            )

        config_errors = validate_config(self.config)
        if config_errors:
            error_msg = "Configuration errors: " + "; ".join(config_errors)
            logger.error(error_msg)
            raise ValueError(error_msg)

        self.models = ModelConfig.from_config(self.config)
        self.credentials = credentials or CredentialProvider(
            host_selector=host_selector,
            environment_key=self.config.get("gemini_api_key"),
            verify_model=self.models.verify,
        )
        self.rng = rng or random.Random()
        self.sleep = sleep

    async def _context(self) -> StudioContext:
        set_session_context()
        client = await self.credentials.resolve_client()
        return StudioContext(
            client=client,
            models=self.models,
            max_retries=self.config.get("max_retries", 3),
            initial_retry_delay_ms=self.config.get("initial_retry_delay_ms", 2000),
            tts_sample_rate=self.config.get("tts_sample_rate", 24000),
            max_reference_images=self.config.get("max_reference_images", 5),
            rng=self.rng,
            sleep=self.sleep,
        )

    def set_custom_api_key(self, key: str) -> None:
        self.credentials.set_custom_api_key(key)

    async def verify_api_key(self, key: str) -> bool:
        return await self.credentials.verify_api_key(key)

    async def analyze_product(
        self,
        product: ProductInput,
        settings: GenerationSettings,
    ) -> AnalysisResult:
        # Reject bad input before resolving credentials or calling the model
        product.validate()
        context = await self._context()
        return await ScriptService(context).analyze_product(product, settings)

    async def generate_image(
        self,
        prompt: Union[PromptInput, str],
        aspect_ratio: Union[AspectRatio, str],
        resolution: Union[ImageResolution, str],
        reference_images: Sequence[str] = (),
    ) -> str:
        context = await self._context()
        return await MediaService(context).generate_image(
            prompt, aspect_ratio, resolution, reference_images
        )

    async def generate_speech(self, text: str, voice_name: str = "Kore") -> str:
        context = await self._context()
        return await MediaService(context).generate_speech(text, voice_name)

    async def regenerate_veo_prompt(self, scene: SceneDraft) -> str:
        context = await self._context()
        return await MediaService(context).regenerate_veo_prompt(scene)
