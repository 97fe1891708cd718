"""Structured logging configuration using structlog.

JSON output for production, console output for development. Profile
attribute bags routinely carry contact details, so log events pass
through a PII redactor before rendering.
"""

import re
import sys
from collections.abc import Iterable, Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

from consentry.config.models.observability import LoggingConfig

# Keys whose values are never logged
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
    "email",
    "phone",
    "mobile",
    "address",
    "ip_address",
    "birth_date",
    "ssn",
})

# (pattern, replacement) pairs applied to string values
PII_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
    (re.compile(r"\d{3}-\d{2}-\d{4}"), "[SSN]"),
    (re.compile(r"\+\d[\d\s\-\(\)]{9,}"), "[PHONE]"),
)

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class PIIRedactor:
    """Processor that masks personal data in log events.

    Values under a sensitive key are replaced outright; any other string
    is scanned for e-mail, SSN and international phone patterns. Nested
    mappings and lists are walked recursively.
    """

    def __init__(self, extra_keys: Iterable[str] = ()) -> None:
        self.keys = SENSITIVE_KEYS | {key.lower() for key in extra_keys}

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, value: Any, key: str | None = None) -> Any:
        if key is not None and key.lower() in self.keys:
            return "[REDACTED]"
        if isinstance(value, Mapping):
            return {k: self._redact(v, str(k)) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._redact(item) for item in value]
        if isinstance(value, str):
            for pattern, replacement in PII_PATTERNS:
                value = pattern.sub(replacement, value)
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" for production, "console" for development
        redact_pii: Whether to mask personal data in log events
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            LEVELS.get(level.upper(), 20)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: LoggingConfig, app_name: str | None = None) -> None:
    """Configure structured logging from the logging settings section.

    When given, app_name is bound as the "app" field of every event.
    """
    setup_logging(
        level=config.level,
        format=config.format,
        redact_pii=config.redact_pii,
    )
    if app_name:
        structlog.contextvars.bind_contextvars(app=app_name)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
