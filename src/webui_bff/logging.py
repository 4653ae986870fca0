"""
Structured logging configuration for the web UI backend-for-frontend.

Uses structlog for structured, context-aware logging with:
- JSON output for production
- Pretty console output for development
- Trace ID correlation from inbound request headers
- A log level that can be changed at runtime from the parameter store
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generator, Protocol

import structlog
from structlog.types import Processor

from .config import get_settings

# Context variables for request-scoped data
_trace_id: ContextVar[str | None] = ContextVar('trace_id', default=None)

# Parameter store level names (pino style) mapped onto stdlib levels
_LEVEL_ALIASES = {
    'trace': logging.DEBUG,
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'fatal': logging.CRITICAL,
    'critical': logging.CRITICAL,
}

_current_level = logging.INFO

logger = structlog.get_logger(__name__)


def get_trace_id() -> str | None:
    """Get the current trace ID from context."""
    return _trace_id.get()


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that adds the service name and trace ID to log entries."""
    event_dict.setdefault('service', get_settings().SERVICE_NAME)

    trace_id = get_trace_id()
    if trace_id:
        event_dict['trace_id'] = trace_id

    return event_dict


def parse_log_level(name: str | None) -> int | None:
    """
    Map a level name to a stdlib level number.

    Accepts pino-style names (``warn``, ``fatal``, ``trace``) and standard
    names in any case. Returns None for unknown names.
    """
    if not name:
        return None
    return _LEVEL_ALIASES.get(name.strip().lower())


def configure_logging(
    json_output: bool | None = None,
    log_level: str | None = None,
) -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: If True, output JSON logs (for production).
                    If False, output pretty console logs (for development).
                    Defaults to settings.LOG_JSON.
        log_level: Override log level (defaults to settings.LOG_LEVEL)
    """
    global _current_level

    settings = get_settings()
    if json_output is None:
        json_output = settings.LOG_JSON
    level_num = parse_log_level(log_level or settings.LOG_LEVEL) or logging.INFO

    _current_level = level_num

    # Standard library logging config (runtime configuration diagnostics)
    logging.basicConfig(
        format='%(levelname)s %(name)s %(message)s',
        stream=sys.stderr,
        level=level_num,
    )

    # Shared processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_info,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        # Production: JSON output
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # Development: Pretty console output
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # Level may change after startup; loggers must pick up the new wrapper
        cache_logger_on_first_use=False,
    )


def set_log_level(name: str) -> bool:
    """
    Change the structured log level at runtime.

    Returns:
        True if the level was applied, False if the name was not recognised
        (the current level is kept).
    """
    global _current_level

    level_num = parse_log_level(name)
    if level_num is None:
        return False

    _current_level = level_num
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level_num))
    logging.getLogger().setLevel(level_num)
    return True


def get_log_level() -> int:
    """Current structured log level as a stdlib level number."""
    return _current_level


class LogLevelSource(Protocol):
    async def log_level(self) -> str:
        ...


async def refresh_log_level(source: LogLevelSource) -> None:
    """
    Apply the log level held in the parameter store.

    Meant to run as a background task after startup: the logger is usable
    at its initial level until this completes. Failures are logged and
    swallowed.
    """
    try:
        level = await source.log_level()
    except Exception as e:
        logger.warning('log_level.refresh_failed', error=str(e), error_type=type(e).__name__)
        return

    if set_log_level(level):
        logger.info('log_level.applied', level=level)
    else:
        logger.warning('log_level.unknown', level=level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


@contextmanager
def logging_context(trace_id: str | None = None) -> Generator[None, None, None]:
    """
    Context manager for setting logging context variables.

    Usage:
        with logging_context(trace_id="4bf92f3577b34da6a3ce929d0e0e4736"):
            logger.info("forward.recovered")  # Includes trace_id
    """
    token = _trace_id.set(trace_id) if trace_id is not None else None
    try:
        yield
    finally:
        if token is not None:
            _trace_id.reset(token)


def trace_id_from_headers(headers: Any) -> str | None:
    """
    Extract a correlation ID from inbound request headers.

    Order of preference: W3C ``traceparent`` trace-id field, then
    ``X-Request-ID``, then the ``Root=`` segment of ``X-Amzn-Trace-Id``.
    ``headers`` is any case-insensitive mapping (e.g. Starlette Headers).
    """
    traceparent = headers.get('traceparent')
    if traceparent:
        parts = traceparent.strip().split('-')
        if len(parts) >= 4 and len(parts[1]) == 32 and parts[1] != '0' * 32:
            return parts[1].lower()

    request_id = headers.get('x-request-id')
    if request_id:
        return request_id.strip()

    amzn = headers.get('x-amzn-trace-id')
    if amzn:
        for segment in amzn.split(';'):
            name, _, value = segment.strip().partition('=')
            if name == 'Root' and value:
                return value

    return None


# Initialize logging on module import from process settings
# The application lifespan reconfigures it once settings are final
configure_logging()
