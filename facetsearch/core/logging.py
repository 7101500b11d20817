"""Logging for facetsearch.

Loggers are stdlib loggers wrapped in a ContextualLogger that carries a set of
dimensions (key/value pairs attached to every record) and an optional message
prefix. Local environments get human-readable lines, every other environment
gets one JSON object per record.

Usage:
    from facetsearch.core.logging import logger

    search_logger = logger.with_prefix("[Search] ").with_context(entity_type="works")
    search_logger.info("Issuing request")
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

from pythonjsonlogger.json import JsonFormatter

from facetsearch.core.config import Environment, settings

_LOCAL_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class _DimensionsFormatter(logging.Formatter):
    """Human-readable formatter that appends dimensions as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        dimensions = getattr(record, "dimensions", None)
        if dimensions:
            rendered = " ".join(f"{k}={v}" for k, v in dimensions.items())
            line = f"{line} [{rendered}]"
        return line


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that attaches dimensions and a prefix to each message."""

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: Optional[Dict[str, Any]] = None,
        prefix: str = "",
    ) -> None:
        """Initialize the contextual logger.

        Args:
            logger: Underlying stdlib logger.
            dimensions: Key/value pairs attached to every record.
            prefix: String prepended to every message.
        """
        super().__init__(logger, {})
        self.dimensions: Dict[str, Any] = dict(dimensions or {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, Any]:
        """Prefix the message and merge dimensions into the record extras."""
        extra = dict(kwargs.get("extra") or {})
        extra["dimensions"] = {**self.dimensions, **extra.get("dimensions", {})}
        kwargs["extra"] = extra
        return f"{self.prefix}{msg}", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions}, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger whose messages start with `prefix`."""
        return ContextualLogger(self.logger, self.dimensions, prefix)


class LoggerConfigurator:
    """Builds configured ContextualLogger instances."""

    @staticmethod
    def _build_handler() -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        if settings.ENVIRONMENT == Environment.LOCAL:
            handler.setFormatter(_DimensionsFormatter(_LOCAL_FORMAT))
        else:
            handler.setFormatter(JsonFormatter(_JSON_FORMAT))
        return handler

    @staticmethod
    def configure_logger(
        name: str, dimensions: Optional[Dict[str, Any]] = None
    ) -> ContextualLogger:
        """Configure a logger by name and wrap it with dimensions.

        Handlers are attached once per logger name, so calling this repeatedly
        for the same name does not duplicate output.

        Args:
            name: Logger name, usually a dotted module path.
            dimensions: Initial dimensions for the returned logger.

        Returns:
            A ContextualLogger around the named stdlib logger.
        """
        base = logging.getLogger(name)
        base.setLevel(settings.LOG_LEVEL)
        if not base.handlers:
            base.addHandler(LoggerConfigurator._build_handler())
            base.propagate = False
        return ContextualLogger(base, dimensions)


logger = LoggerConfigurator.configure_logger("facetsearch")
