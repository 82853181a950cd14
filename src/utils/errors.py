"""Error taxonomy shared by the Gemini orchestration services."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure class of a remote Gemini call."""

    OVERLOADED = "overloaded"
    INTERNAL_FAULT = "internal_fault"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"

    @property
    def retryable(self) -> bool:
        return self is not ErrorKind.OTHER


class StudioError(Exception):
    """Base error for the studio core."""

    user_message = "系统错误: 未知错误"

    def __init__(self, message: str = "", user_message: str | None = None):
        super().__init__(message or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class ServiceError(StudioError):
    """Remote failure, classified by the transport layer."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.OTHER,
        status: int | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message, user_message=user_message)
        self.kind = kind
        self.status = status
        if user_message is None:
            self.user_message = f"系统错误: {message}"


class TransientServiceError(ServiceError):
    """Overloaded, internal fault or rate limited. Retried by the controller."""


class QuotaExhaustedError(TransientServiceError):
    """Quota or resource exhaustion. Also triggers model fallback."""

    def __init__(self, message: str, status: int | None = 429):
        super().__init__(
            message,
            kind=ErrorKind.RATE_LIMITED,
            status=status,
            user_message="API 配额耗尽 (429): 请稍后重试。",
        )


class MissingPayloadError(ServiceError):
    """Well-formed response without the expected media part."""

    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.OTHER, user_message=message)


class ParseError(StudioError):
    """Structured response could not be parsed."""

    user_message = "无法解析 AI 返回的分析结果，请重试。"


class ValidationError(StudioError):
    """Caller input rejected before any remote call."""

    def __init__(self, message: str):
        super().__init__(message, user_message=f"错误: {message}")


class CredentialError(StudioError):
    """No credential source yielded a usable client."""

    user_message = "错误: API Key 无效或无法连接"
