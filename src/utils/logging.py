"""Logging setup for the studio core.

structlog renders both its own loggers and stdlib ``logging.getLogger``
loggers, so every service module can keep using the stdlib API. Each studio
operation runs under a short session id that is stamped on its log lines.
"""

import logging
import sys
import uuid
from contextvars import ContextVar

import structlog

# Session id of the studio operation currently running
current_session_id: ContextVar[str | None] = ContextVar("current_session_id", default=None)

QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "google_genai",
    "google_genai.models",
    "urllib3.connectionpool",
)


def add_session_id(_logger, _method_name, event_dict):
    """Stamp the active session id on an event."""
    session_id = current_session_id.get()
    if session_id:
        event_dict["session_id"] = session_id
    return event_dict


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_session_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(json_output: bool):
    if json_output:
        # Dialogue and error text are mostly Chinese; keep them readable
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Emit JSON lines instead of console output
    """
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_session_context(session_id: str | None = None) -> str:
    """Start a logging session for one studio operation.

    Args:
        session_id: Explicit id; a 12-character random hex id when omitted

    Returns:
        The session id now in effect
    """
    session_id = session_id or uuid.uuid4().hex[:12]
    current_session_id.set(session_id)
    return session_id


def clear_session_context() -> None:
    current_session_id.set(None)
