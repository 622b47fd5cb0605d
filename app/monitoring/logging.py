"""
Structured logging for the marketplace API.

structlog drives every logger. Development gets a Rich console renderer,
other environments get one JSON object per line. Before rendering, each
event passes through a sanitizer so that account data never reaches the
logs:

- values of credential keys (``password``, ``token``, ``password_hash``...)
  are replaced outright
- email addresses and JWTs inside free text are masked
- ``Authorization`` and cookie headers are masked
- control characters are escaped so a crafted title cannot forge log lines

Every line emitted while serving a request carries its ``request_id``.

Examples
--------
>>> from app.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Role changed", target_id="123", role="manager")
"""

from logging import INFO, Handler, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path
from re import Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from app.configs.settings import settings
from app.utils.helpers import today_str

REDACTED = "[REDACTED]"

SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {"authorization", "cookie", "set-cookie", "proxy-authorization"},
)

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "password_hash", "token", "access_token", "secret_key", "api_secret"},
)

# JWTs contain dots and must be matched before emails
PII_PATTERNS: list[tuple[Pattern, str]] = [
    (re_compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"), "[REDACTED_JWT]"),
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
]

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def sanitize_log_message(message: str) -> str:
    r"""
    Escape control characters so one event stays on one line.

    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return str(message).translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """
    Mask credential-bearing headers.

    >>> sanitize_headers({"Authorization": "Bearer token123", "Content-Type": "json"})
    {'Authorization': '[REDACTED]', 'Content-Type': 'json'}
    """
    return {k: REDACTED if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def redact_pii(message: str) -> str:
    """
    Mask emails and JWTs found in free text.

    >>> redact_pii("User user@example.com logged in")
    'User [REDACTED_EMAIL] logged in'
    """
    for pattern, replacement in PII_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """
    Scrub one event before it is rendered.

    Args:
        logger: The wrapped logger instance.
        method_name: The name of the logging method being called.
        event_dict: The event dictionary being built.

    Returns:
        The same event with credentials and PII masked.
    """
    for key, value in event_dict.items():
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = redact_pii(sanitize_log_message(value))
        elif key.lower() == "headers" and isinstance(value, dict):
            event_dict[key] = sanitize_headers(value)

    return event_dict


def get_processors(*, colors: bool = True) -> list[Processor]:
    """
    Build the processor chain used for stdlib records.

    The last processor is the renderer: Rich console in development,
    JSON elsewhere.
    """
    renderer: Processor
    if settings.ENVIRONMENT == "development":
        renderer = ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    else:
        renderer = JSONRenderer()

    return [
        merge_contextvars,
        add_log_level,
        add_timestamp,
        sanitize_event_dict,
        ExtraAdder(),
        renderer,
    ]


def _formatter(*, colors: bool) -> ProcessorFormatter:
    *pre_chain, renderer = get_processors(colors=colors)
    return ProcessorFormatter(
        processors=[ProcessorFormatter.remove_processors_meta, renderer],
        foreign_pre_chain=pre_chain,
    )


def _file_handler() -> Handler | None:
    """Rotating file handler, only when ``LOG_TO_FILE`` is set."""
    if not settings.LOG_TO_FILE:
        return None

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
    handler.setLevel(INFO)
    handler.setFormatter(_formatter(colors=False))
    return handler


def configure_logging() -> None:
    """Route structlog and stdlib logging through the sanitizing chain."""
    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            add_timestamp,
            sanitize_event_dict,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Reloads call this again; replace handlers instead of stacking them
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    console = StreamHandler()
    console.setFormatter(_formatter(colors=True))
    root.addHandler(console)

    if (file_handler := _file_handler()) is not None:
        root.addHandler(file_handler)


def get_logger(name: str) -> BoundLogger:
    """
    Get a structured logger bound to ``name``.

    >>> logger = get_logger("app.routes.users")
    >>> logger.info("User suspended", target_id="123")
    """
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Attach ``request_id`` to every event of the current request."""
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()
