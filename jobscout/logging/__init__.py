"""Structured logging helpers."""

import logging
from typing import Optional, Union

from .config import configure_logging
from .context import bind_context, log_context


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its ``component`` with per-call extra fields."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Return a logger, tagged with ``component`` on every record when given.

    Example:
        >>> logger = get_logger(__name__, component="aggregator")
        >>> logger.info("Pass started", extra={"event": "aggregator.started"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = [
    "ComponentLoggerAdapter",
    "get_logger",
    "configure_logging",
    "log_context",
    "bind_context",
]
