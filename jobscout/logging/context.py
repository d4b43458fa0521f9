"""Scoped logging context backed by contextvars.

Fields pushed here (``run_id``, ``company`` ...) are copied onto every log
record by :class:`jobscout.logging.config.ContextualFilter`. Worker threads do
not inherit contextvars, so callables submitted to an executor are wrapped with
:func:`bind_context`.
"""

import contextvars
from contextvars import ContextVar, Token
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active context fields."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the active context; undo with pop_log_context()."""
    return LogContextVar.set({**LogContextVar.get(), **kwargs})


def pop_log_context(token: Token) -> None:
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field (used by tests)."""
    LogContextVar.set({})


def bind_context(func: Callable[..., T]) -> Callable[..., T]:
    """Wrap ``func`` so it runs inside a snapshot of the caller's context.

    Example:
        >>> with log_context(run_id="abc"):
        ...     executor.submit(bind_context(adapter.scrape))
    """
    snapshot = contextvars.copy_context()

    def runner(*args, **kwargs):
        return snapshot.run(func, *args, **kwargs)

    return runner


class log_context:
    """Context manager that pushes fields on entry and restores them on exit.

    Example:
        >>> with log_context(run_id="abc123", company="Linear"):
        ...     logger.info("Scraping company")
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
