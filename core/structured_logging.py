"""Log record correlation: every record carries the run, phase and file it
was emitted for."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_UNSET = "-"

_CONTEXT: dict[str, contextvars.ContextVar[str]] = {
    name: contextvars.ContextVar(name, default=_UNSET)
    for name in ("run_id", "phase", "file")
}

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "file=%(file)s | %(name)s | %(message)s"
)


class _RunContextFilter(logging.Filter):
    """Copy the current correlation values onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, var in _CONTEXT.items():
            setattr(record, name, var.get())
        return True


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Install the correlation format and filter on the root handlers.

    Args:
        level: Numeric level or level name such as ``"DEBUG"``; unknown
            names fall back to INFO.
    """
    level = _resolve_level(level)
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        for handler in root.handlers:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    for handler in root.handlers:
        if not any(isinstance(f, _RunContextFilter) for f in handler.filters):
            handler.addFilter(_RunContextFilter())


def set_run_id(run_id: str | None = None) -> str:
    """Set the run correlation ID, generating a UUID when none is given."""
    value = run_id or str(uuid.uuid4())
    _CONTEXT["run_id"].set(value)
    return value


def get_run_id() -> str:
    return _CONTEXT["run_id"].get()


@contextmanager
def _scoped(name: str, value: str) -> Iterator[None]:
    token = _CONTEXT[name].set(value)
    try:
        yield
    finally:
        _CONTEXT[name].reset(token)


def phase_scope(phase: str):
    """Tag records emitted inside the block with a pipeline phase."""
    return _scoped("phase", phase)


def file_scope(path: str):
    """Tag records emitted inside the block with the file being reflected."""
    return _scoped("file", path)
