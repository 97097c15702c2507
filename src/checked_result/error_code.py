"""Decorate exceptions with system error codes.

An :class:`ErrorCode` renders as ``error_code(<message>, ec=<value>,
ecat=<category>)`` and can be attached to any exception as auxiliary context.
Attached codes show up in the exception's notes and can be collected back
from a whole ``__cause__``/``__context__`` chain.
"""

from __future__ import annotations

from dataclasses import dataclass
import errno
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

SYSTEM_CATEGORY = "system"


@dataclass(frozen=True, slots=True)
class ErrorCode:
    """A numeric error code with its category and human-readable message."""

    value: int
    category: str
    message: str

    @classmethod
    def from_errno(cls, code: int) -> ErrorCode:
        return cls(value=code, category=SYSTEM_CATEGORY, message=os.strerror(code))

    @classmethod
    def from_oserror(cls, exc: OSError) -> ErrorCode:
        """Build from an ``OSError``; a missing errno maps to ``EIO``."""
        code = exc.errno if exc.errno is not None else errno.EIO
        message = exc.strerror or os.strerror(code)
        return cls(value=code, category=SYSTEM_CATEGORY, message=message)

    def __str__(self) -> str:
        return f"error_code({self.message}, ec={self.value}, ecat={self.category})"


def attach_error_code[E: BaseException](exc: E, code: ErrorCode) -> E:
    """Attach ``code`` to ``exc`` and return ``exc`` for ``raise`` chaining.

    Example:
        raise attach_error_code(ConnectionError("peer gone"), ErrorCode.from_errno(104))
    """
    codes: tuple[ErrorCode, ...] = getattr(exc, "error_codes", ())
    exc.error_codes = (*codes, code)  # type: ignore[attr-defined]
    exc.add_note(str(code))
    return exc


def error_codes_of(exc: BaseException) -> list[ErrorCode]:
    """Collect attached codes from ``exc`` and its cause/context chain."""
    return [code for cur in _walk_exception_chain(exc) for code in _codes_on(cur)]


def _codes_on(exc: BaseException) -> tuple[ErrorCode, ...]:
    codes = getattr(exc, "error_codes", ())
    return tuple(c for c in codes if isinstance(c, ErrorCode))


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
