"""Exception hierarchy for checked_result."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checked_result.failure import FailureHandle


class CheckedResultError(Exception):
    """Base exception for all checked_result errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(CheckedResultError):
    """Settings validation or resolution failed."""


class SlicedTypeError(CheckedResultError, TypeError):
    """A failure was passed under a declared type that hides its real type.

    Capturing it anyway would lose the subclass information that
    ``is_failure_of()`` needs later, so the factory refuses.
    """

    def __init__(
        self,
        message: str,
        *,
        declared: type[BaseException],
        actual: type[BaseException],
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.declared = declared
        self.actual = actual


class NoActiveFailureError(CheckedResultError):
    """``from_failure()`` was called with no exception being handled."""


class UnreadFailureViolation(CheckedResultError):
    """A container holding a failure was discarded without being examined.

    Not raised into normal control flow: it describes the breach when it is
    logged before a strict-mode abort. ``__cause__`` is the unread error.
    """

    def __init__(self, handle: FailureHandle) -> None:
        super().__init__(
            f"error result not checked: {handle.describe()}",
            hint=(
                "Call is_value(), get() or is_failure_of() before discarding "
                "the result, or register a sink with set_unchecked_failure_sink()."
            ),
        )
        self.handle = handle
        self.__cause__ = handle.error
