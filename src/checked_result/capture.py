"""Helpers that turn raising calls into CheckedResult-returning ones."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from checked_result.result import CheckedResult

if TYPE_CHECKING:
    from collections.abc import Callable


def capture[**P, T](
    fn: Callable[P, T], /, *args: P.args, **kwargs: P.kwargs
) -> CheckedResult[T]:
    """Call ``fn`` and wrap its return value or the ``Exception`` it raised.

    ``BaseException``s that are not ``Exception`` (``KeyboardInterrupt``,
    ``SystemExit``) propagate.
    """
    try:
        value = fn(*args, **kwargs)
    except Exception:
        return CheckedResult.from_failure()
    return CheckedResult(value)


def checked[**P, T](fn: Callable[P, T]) -> Callable[P, CheckedResult[T]]:
    """Decorate ``fn`` so that it returns a CheckedResult instead of raising."""

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> CheckedResult[T]:
        return capture(fn, *args, **kwargs)

    return wrapper
