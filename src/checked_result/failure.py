"""Opaque handle around a captured failure."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import TracebackType  # noqa: TC003 - used at runtime in dataclass
from typing import NoReturn

FailureKind = type[BaseException] | tuple[type[BaseException], ...]


@dataclass(frozen=True, slots=True, eq=False)
class FailureHandle:
    """An immutable, shareable reference to a captured exception.

    The handle remembers the traceback the exception carried when it was
    captured so that every ``rethrow()`` reports the original raise site
    instead of accumulating frames from each re-raise.
    """

    error: BaseException
    traceback: TracebackType | None = field(default=None, repr=False)

    @classmethod
    def capture(cls, error: BaseException) -> FailureHandle:
        """Wrap ``error`` together with its current traceback."""
        if not isinstance(error, BaseException):
            raise TypeError(
                f"failure must be an exception instance, got {type(error).__name__}"
            )
        return cls(error=error, traceback=error.__traceback__)

    @property
    def kind(self) -> type[BaseException]:
        return type(self.error)

    def matches(self, kind: FailureKind) -> bool:
        """Return True when the captured error is an instance of ``kind``."""
        return isinstance(self.error, kind)

    def rethrow(self) -> NoReturn:
        """Raise the captured exception object unchanged."""
        raise self.error.with_traceback(self.traceback)

    def describe(self) -> str:
        message = str(self.error)
        name = self.kind.__qualname__
        return f"{name}: {message}" if message else name
