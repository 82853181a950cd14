"""Transport adapter over the google-genai async client.

Translates SDK failures into ServiceError subclasses carrying an explicit
ErrorKind, so retry and fallback decisions read a field instead of searching
error messages.
"""

import base64
import logging
from typing import Any, Optional

from google.genai import Client, errors, types

from utils.errors import (
    ErrorKind,
    QuotaExhaustedError,
    ServiceError,
    TransientServiceError,
)
from utils.retry import classify_error

logger = logging.getLogger(__name__)


def to_service_error(error: Exception) -> ServiceError:
    """Wrap a raw client failure in the matching ServiceError subclass."""
    if isinstance(error, ServiceError):
        return error

    kind = classify_error(error)
    code = getattr(error, "code", None)
    status = code if isinstance(code, int) else None
    message = getattr(error, "message", None) or str(error)

    if kind is ErrorKind.RATE_LIMITED:
        return QuotaExhaustedError(message, status=status or 429)
    if kind.retryable:
        return TransientServiceError(message, kind=kind, status=status)
    return ServiceError(message, kind=kind, status=status)


def first_inline_data(response: Any) -> Optional[str]:
    """Return the first inline media payload of a response as base64 text.

    The SDK decodes inline data to bytes; stubs may hand back base64 text.
    Both are normalized to base64 text.
    """
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline else None
            if not data:
                continue
            if isinstance(data, (bytes, bytearray)):
                return base64.b64encode(bytes(data)).decode("ascii")
            return str(data)
    return None


def decode_base64_payload(data: str) -> bytes:
    """Decode base64 media, tolerating a data-URL prefix."""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    return base64.b64decode(data)


def inline_part(data: str, mime_type: str) -> types.Part:
    """Build an inline-data part from base64 media."""
    return types.Part(
        inline_data=types.Blob(mime_type=mime_type, data=decode_base64_payload(data))
    )


def text_part(text: str) -> types.Part:
    return types.Part(text=text)


class GenAIClient:
    """Async Gemini client with classified failures."""

    def __init__(self, client: Client):
        """Initialize the adapter.

        Args:
            client: google.genai Client (or any object exposing
                ``aio.models.generate_content``)
        """
        self.client = client

    @classmethod
    def from_api_key(cls, api_key: str, client_factory=Client) -> "GenAIClient":
        return cls(client_factory(api_key=api_key))

    async def generate_content(
        self,
        model: str,
        contents: Any,
        config: Optional[types.GenerateContentConfig] = None,
    ) -> Any:
        """Issue one generate_content call.

        Raises:
            ServiceError: Classified failure (TransientServiceError /
                QuotaExhaustedError for retryable classes)
        """
        logger.debug(f"generate_content: model={model}")
        try:
            return await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except errors.APIError as e:
            raise to_service_error(e) from e
        except ServiceError:
            raise
        except Exception as e:
            error = to_service_error(e)
            if error.kind is ErrorKind.OTHER:
                raise
            raise error from e
