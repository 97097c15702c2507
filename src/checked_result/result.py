"""CheckedResult: a value or a captured failure that must be examined.

A ``CheckedResult`` holds exactly one of two representations, a value
(``_Value``) or a captured failure (``_Failure``). Storing a failure leaves
the container *unexamined*; every read that looks at which case occurred
marks it examined. Discarding an unexamined failure is reported through
:mod:`checked_result.diagnostics`.

Example:
    def parse_port(text: str) -> CheckedResult[int]:
        try:
            return CheckedResult(int(text))
        except ValueError:
            return CheckedResult.from_failure()

    port = parse_port("80a")
    if not port.is_value():
        port = CheckedResult(8080)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
import logging
import sys
from typing import TYPE_CHECKING, Any, Self, overload

from checked_result.diagnostics import report_unchecked_failure
from checked_result.errors import (
    CheckedResultError,
    NoActiveFailureError,
    SlicedTypeError,
)
from checked_result.failure import FailureHandle

if TYPE_CHECKING:
    from types import TracebackType

    from checked_result.failure import FailureKind

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Value[T]:
    value: T


@dataclass(frozen=True, slots=True)
class _Failure:
    handle: FailureHandle


class CheckedResult[T]:
    """Either a value of type ``T`` or a captured failure.

    Construct from a value with ``CheckedResult(value)`` or
    :meth:`from_value`; capture a failure with :meth:`from_failure`.
    Inspect with :meth:`is_value`, :meth:`get` or :meth:`is_failure_of`.
    """

    __slots__ = ("__weakref__", "_examined", "_slot")

    _slot: _Value[T] | _Failure | None
    _examined: bool

    def __init__(self, value: T) -> None:
        self._slot = _Value(value)
        self._examined = True

    # --- Construction ---

    @classmethod
    def from_value(cls, value: T) -> CheckedResult[T]:
        """Create a result holding ``value``. It needs no examination."""
        return cls(value)

    @overload
    @classmethod
    def from_failure(cls) -> CheckedResult[Any]: ...

    @overload
    @classmethod
    def from_failure(
        cls,
        failure: BaseException | FailureHandle,
        /,
        *,
        declared: type[BaseException] | None = ...,
    ) -> CheckedResult[Any]: ...

    @classmethod
    def from_failure(
        cls,
        failure: BaseException | FailureHandle | None = None,
        /,
        *,
        declared: type[BaseException] | None = None,
    ) -> CheckedResult[Any]:
        """Create a result holding a failure.

        The captured traceback references the frame that handled the
        exception. If that frame also holds the result, the two form a
        reference cycle and an unexamined failure is only reported when the
        garbage collector runs, possibly inside unrelated code. Use the
        result as a context manager or call ``release()`` to discard it at
        a known point.

        Args:
            failure: An exception instance or an existing ``FailureHandle``.
                When omitted, the exception currently being handled is
                captured.
            declared: The type the caller holds ``failure`` as. When given,
                the exception's runtime type must be exactly this type.

        Raises:
            SlicedTypeError: ``failure`` is a subclass instance passed under
                a broader ``declared`` type.
            NoActiveFailureError: No argument was given and no exception is
                being handled.
            TypeError: ``failure`` is not an exception.
        """
        if failure is None:
            failure = sys.exception()
            if failure is None:
                raise NoActiveFailureError(
                    "from_failure() called with no exception being handled",
                    hint="Call it inside an except block or pass the exception.",
                )

        if isinstance(failure, FailureHandle):
            handle = failure
        else:
            handle = FailureHandle.capture(failure)
            if declared is not None and type(failure) is not declared:
                raise SlicedTypeError(
                    f"{type(failure).__qualname__} passed as "
                    f"{declared.__qualname__}: slicing detected",
                    declared=declared,
                    actual=type(failure),
                    hint="Pass the exception under its own type.",
                )

        log.debug("Captured failure %s", handle.describe())
        return cls._adopt(_Failure(handle), examined=False)

    @classmethod
    def _adopt(cls, slot: _Value[T] | _Failure, *, examined: bool) -> Self:
        result = cls.__new__(cls)
        result._slot = slot
        result._examined = examined
        return result

    # --- Inspection ---

    @property
    def examined(self) -> bool:
        """Whether the discriminant has been looked at. Reading this is not a check."""
        return self._examined

    def is_value(self) -> bool:
        """Return True when a value is held. Counts as examining the result."""
        slot = self._live_slot()
        self._examined = True
        return isinstance(slot, _Value)

    def get(self) -> T:
        """Return the value, or re-raise the captured exception unchanged."""
        slot = self._live_slot()
        self._examined = True
        if isinstance(slot, _Failure):
            # The traceback must not keep this container alive.
            del self
            slot.handle.rethrow()
        return slot.value

    def is_failure_of(self, kind: FailureKind) -> bool:
        """Return True when the held failure is an instance of ``kind``.

        ``kind`` is a type or a tuple of types, as accepted by ``except``.
        Never raises the stored failure.
        """
        slot = self._live_slot()
        self._examined = True
        return isinstance(slot, _Failure) and slot.handle.matches(kind)

    def failure(self) -> FailureHandle | None:
        """Return the failure handle, or None when a value is held."""
        slot = self._live_slot()
        self._examined = True
        return slot.handle if isinstance(slot, _Failure) else None

    def value_or(self, default: T) -> T:
        """Return the value, or ``default`` when a failure is held."""
        slot = self._live_slot()
        self._examined = True
        return slot.value if isinstance(slot, _Value) else default

    def _live_slot(self) -> _Value[T] | _Failure:
        slot = self._slot
        if slot is None:
            raise CheckedResultError(
                "result has been released",
                hint="Do not use a CheckedResult after release() or its with block.",
            )
        return slot

    # --- Copy, move, swap ---

    def __copy__(self) -> CheckedResult[T]:
        return self._adopt(self._copied_slot(copy.copy), examined=self._examined)

    def __deepcopy__(self, memo: dict[int, Any]) -> CheckedResult[T]:
        return self._adopt(
            self._copied_slot(lambda value: copy.deepcopy(value, memo)),
            examined=self._examined,
        )

    def _copied_slot(self, copy_value: Any) -> _Value[T] | _Failure:
        slot = self._live_slot()
        if isinstance(slot, _Value):
            return _Value(copy_value(slot.value))
        # Failure handles are immutable once captured; copies share them.
        return slot

    def copy_from(self, other: CheckedResult[T]) -> Self:
        """Replace this result's contents with a copy of ``other``'s."""
        if other is self:
            return self
        slot = other._copied_slot(copy.copy)
        self._discard()
        self._slot = slot
        self._examined = other._examined
        return self

    def move(self) -> CheckedResult[T]:
        """Return a new result that takes over this one's contents.

        The new result inherits the examined flag; this one is marked
        examined so discarding it stays silent.
        """
        moved = self._adopt(self._live_slot(), examined=self._examined)
        self._examined = True
        return moved

    def move_from(self, other: CheckedResult[T]) -> Self:
        """Replace this result's contents by taking over ``other``'s."""
        if other is self:
            return self
        slot = other._live_slot()
        examined = other._examined
        self._discard()
        self._slot = slot
        self._examined = examined
        other._examined = True
        return self

    def swap(self, other: CheckedResult[T]) -> None:
        """Exchange contents and examined flags with ``other``.

        Value/value, value/failure, failure/value and failure/failure pairs
        are all exchanged the same way: each side ends up holding what the
        other held, including whether it had been examined.
        """
        if other is self:
            return
        self._live_slot()
        other._live_slot()
        self._slot, other._slot, self._examined, other._examined = (
            other._slot,
            self._slot,
            other._examined,
            self._examined,
        )

    # --- Destruction ---

    def release(self) -> None:
        """Discard the contents now, reporting an unexamined failure.

        Idempotent. A released result can no longer be inspected.
        """
        self._discard()
        self._slot = None

    def _discard(self) -> None:
        slot = getattr(self, "_slot", None)
        if isinstance(slot, _Failure) and not self._examined:
            self._examined = True
            report_unchecked_failure(slot.handle)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __del__(self) -> None:
        self._discard()

    def __repr__(self) -> str:
        slot = getattr(self, "_slot", None)
        if slot is None:
            return f"{type(self).__name__}(<released>)"
        if isinstance(slot, _Value):
            return f"{type(self).__name__}(value={slot.value!r})"
        return (
            f"{type(self).__name__}(failure={slot.handle.error!r}, "
            f"examined={self._examined})"
        )
