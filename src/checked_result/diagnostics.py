"""Reporting of failures that were discarded without being examined.

One process-wide sink may be registered. When it is, a violation is handed
to it and execution continues. Otherwise the resolved settings decide:
``"log"`` mode uses :func:`log_unchecked_failure`, ``"strict"`` mode (the
default) treats the violation as a fatal programming error and aborts.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import os
import threading
from typing import TYPE_CHECKING

from checked_result.config import current_settings
from checked_result.errors import ConfigurationError, UnreadFailureViolation

if TYPE_CHECKING:
    from checked_result.failure import FailureHandle

log = logging.getLogger(__name__)

UncheckedFailureSink = Callable[["FailureHandle"], None]

_lock = threading.Lock()
_sink: UncheckedFailureSink | None = None


def set_unchecked_failure_sink(sink: UncheckedFailureSink) -> None:
    """Register the process-wide sink for unexamined failures."""
    global _sink
    if not callable(sink):
        raise TypeError("sink must be callable")
    with _lock:
        _sink = sink
    log.debug("Registered unchecked-failure sink %r", sink)


def get_unchecked_failure_sink() -> UncheckedFailureSink | None:
    with _lock:
        return _sink


def clear_unchecked_failure_sink() -> None:
    """Remove the registered sink, falling back to the configured mode."""
    global _sink
    with _lock:
        _sink = None


def log_unchecked_failure(handle: FailureHandle) -> None:
    """Sink that writes the unread failure and its traceback to the log."""
    level = current_settings().log_level_number
    log.log(
        level,
        "Unchecked failure discarded: %s",
        handle.describe(),
        exc_info=(handle.kind, handle.error, handle.traceback),
    )


def report_unchecked_failure(handle: FailureHandle) -> None:
    """Report that ``handle`` was discarded without being examined.

    Safe to call from any thread and from ``__del__``: a sink that raises is
    logged and otherwise ignored.
    """
    sink = get_unchecked_failure_sink()
    if sink is None and _configured_mode() == "log":
        sink = log_unchecked_failure
    if sink is None:
        _fail_fast(handle)
        return
    try:
        sink(handle)
    except Exception:
        log.exception("Unchecked-failure sink %r raised", sink)


def _configured_mode() -> str:
    """Return the configured mode; invalid settings fall back to strict."""
    try:
        return current_settings().unchecked_mode
    except ConfigurationError:
        log.exception("Invalid settings; reporting unchecked failure in strict mode")
        return "strict"


def _fail_fast(handle: FailureHandle) -> None:
    violation = UnreadFailureViolation(handle)
    log.critical(
        "%s",
        violation,
        exc_info=(type(violation), violation, None),
    )
    os.abort()
