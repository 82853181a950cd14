"""API credential resolution and verification."""

import logging
import os
from typing import Optional, Protocol

from google.genai import Client, types

from services.genai_client import GenAIClient, text_part
from utils.errors import CredentialError, ValidationError

logger = logging.getLogger(__name__)

ENVIRONMENT_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")
DEFAULT_VERIFY_MODEL = "gemini-2.5-flash"


class HostKeySelector(Protocol):
    """Host environment capability that lets the user pick a key.

    The selected key is exposed to this process through the environment.
    """

    async def has_selected_api_key(self) -> bool: ...

    async def open_select_key(self) -> None: ...


def environment_api_key() -> Optional[str]:
    for name in ENVIRONMENT_KEY_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


class CredentialProvider:
    """Resolves which API key to build a client with.

    Order: user-set key, then the host key-selection flow, then the ambient
    environment key.
    """

    def __init__(
        self,
        custom_api_key: Optional[str] = None,
        host_selector: Optional[HostKeySelector] = None,
        environment_key: Optional[str] = None,
        client_factory=Client,
        verify_model: str = DEFAULT_VERIFY_MODEL,
    ):
        """Initialize the provider.

        Args:
            custom_api_key: Key previously set by the user
            host_selector: Optional host key-selection capability
            environment_key: Explicit ambient key (defaults to GEMINI_API_KEY / API_KEY)
            client_factory: Callable building a google.genai Client from api_key
            verify_model: Model used for the verification call
        """
        self.custom_api_key = custom_api_key.strip() if custom_api_key else None
        self.host_selector = host_selector
        self.environment_key = environment_key
        self.client_factory = client_factory
        self.verify_model = verify_model

    def set_custom_api_key(self, key: str) -> None:
        """Set the user-supplied key used for every later resolution.

        Persisting the key is the caller's responsibility.
        """
        if not key or not key.strip():
            raise ValidationError("API Key 不能为空")
        self.custom_api_key = key.strip()
        logger.info("Custom API key set")

    async def resolve_api_key(self) -> str:
        """Return the key to use.

        Raises:
            CredentialError: No source yields a key
        """
        if self.custom_api_key:
            return self.custom_api_key

        if self.host_selector is not None:
            if not await self.host_selector.has_selected_api_key():
                logger.info("No host-selected API key, opening key selection")
                await self.host_selector.open_select_key()

        key = self.environment_key or environment_api_key()
        if not key:
            raise CredentialError("No Gemini API key configured (set GEMINI_API_KEY or a custom key)")
        return key

    async def resolve_client(self) -> GenAIClient:
        """Build a client for the resolved key. Makes no model call."""
        key = await self.resolve_api_key()
        return GenAIClient.from_api_key(key, client_factory=self.client_factory)

    async def verify_api_key(self, key: str) -> bool:
        """Check a key with one minimal generation call.

        Returns:
            True on success, False on any failure (never raises)
        """
        try:
            client = GenAIClient.from_api_key(key, client_factory=self.client_factory)
            await client.generate_content(
                model=self.verify_model,
                contents=types.Content(role="user", parts=[text_part("ping")]),
            )
            return True
        except Exception as e:
            logger.error(f"API key verification failed: {e}")
            return False
