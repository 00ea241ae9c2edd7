"""Structured logging for the page audit engine.

Every audited page gets a run ID. ``run_context`` binds it, together with
the page URL, to every event logged while the page's results are built,
and ``audit_context`` narrows events down to a single audit. Both bind
through ``structlog.contextvars`` and are merged into each event.

Example usage:
    from pageaudit.core.logging import configure_logging, get_logger, run_context

    configure_logging()
    logger = get_logger(__name__)

    with run_context(url="https://example.com"):
        results = registry.run_all(artifacts)
        logger.info("page_audited", audits=len(results))
"""

import logging
import re
import socket
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

PAGEAUDIT_VERSION = "0.4.0"

RUN_ID_KEY = "run_id"

# Event fields that may quote page content and are escaped before rendering
ESCAPED_FIELDS = ("event", "debug_string", "error")
MAX_FIELD_LENGTH = 10000

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

# Logger name prefix -> minimum level
_module_log_levels: dict[str, int] = {}


def generate_run_id() -> str:
    """Generate a unique ID for one audited page run."""
    return str(uuid.uuid4())


def get_run_id() -> str | None:
    """Return the run ID bound in the current context, if any."""
    return structlog.contextvars.get_contextvars().get(RUN_ID_KEY)


@contextmanager
def run_context(run_id: str | None = None, url: str | None = None) -> Iterator[str]:
    """Bind a run ID, and optionally the audited URL, to all events.

    Example:
        with run_context(url="https://example.com") as run_id:
            logger.info("aggregating")  # Includes run_id and url

    Yields:
        The bound run ID, generated when not given.
    """
    run_id = run_id or generate_run_id()
    fields: dict[str, Any] = {RUN_ID_KEY: run_id}
    if url is not None:
        fields["url"] = url
    with structlog.contextvars.bound_contextvars(**fields):
        yield run_id


@contextmanager
def audit_context(audit_name: str, **fields: Any) -> Iterator[None]:
    """Bind the name of the audit being run to all events."""
    with structlog.contextvars.bound_contextvars(audit=audit_name, **fields):
        yield


# =============================================================================
# Structlog Processors
# =============================================================================


@lru_cache(maxsize=1)
def _get_hostname() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return "unknown"


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the package version and hostname."""
    event_dict.setdefault("pageaudit_version", PAGEAUDIT_VERSION)
    event_dict.setdefault("hostname", _get_hostname())
    return event_dict


def _escape(value: str) -> str:
    escaped = _ANSI_ESCAPE.sub("", value).replace("\r", "\\r").replace("\n", "\\n")
    if len(escaped) > MAX_FIELD_LENGTH:
        escaped = escaped[: MAX_FIELD_LENGTH - 15] + "... [TRUNCATED]"
    return escaped


def escape_page_content(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Escape line breaks and strip ANSI sequences from free-text fields.

    Debug strings and error messages often quote page markup or console
    output, which would otherwise split or color a log line.
    """
    for key in ESCAPED_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and value:
            event_dict[key] = _escape(value)
    return event_dict


def _to_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def filter_by_module_level(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Drop events below the level set for the most specific logger prefix."""
    logger_name = event_dict.get("logger")
    if not _module_log_levels or not logger_name:
        return event_dict

    matches = [
        module
        for module in _module_log_levels
        if logger_name == module or logger_name.startswith(f"{module}.")
    ]
    if not matches:
        return event_dict

    threshold = _module_log_levels[max(matches, key=len)]
    if method_name == "exception":
        method_name = "error"
    if _to_level(method_name) < threshold:
        raise structlog.DropEvent
    return event_dict


# =============================================================================
# Logging Configuration
# =============================================================================


def set_module_log_level(module: str, level: int | str) -> None:
    """Set the minimum level for a logger name prefix, e.g. ``pageaudit.report``."""
    _module_log_levels[module] = _to_level(level)


def get_module_log_level(module: str) -> int | None:
    """Get the level override for a logger name prefix, if any."""
    return _module_log_levels.get(module)


def clear_module_log_levels() -> None:
    """Clear all module-specific log level overrides."""
    _module_log_levels.clear()


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_common_fields,
        filter_by_module_level,
        escape_page_content,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    module_levels: dict[str, str | int] | None = None,
) -> None:
    """Configure structured logging for the engine.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines. If None, JSON is used when stdout
            is not a TTY and colored console output otherwise.
        log_file: Optional file that receives the same records
        module_levels: Logger name prefix to level overrides
    """
    if json_output is None:
        json_output = not sys.stdout.isatty()
    level = _to_level(level)

    for module, module_level in (module_levels or {}).items():
        set_module_log_level(module, module_level)

    shared_processors = _shared_processors()
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=shared_processors
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def configure_logging_from_settings() -> None:
    """Configure logging from the cached PageAuditSettings."""
    # Import here to avoid circular imports
    from pageaudit.core.settings import get_cached_settings

    settings = get_cached_settings().logging
    configure_logging(
        level=settings.level,
        json_output=settings.json_output,
        log_file=settings.file,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Reset logging configuration and bound context, for tests."""
    clear_module_log_levels()
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
