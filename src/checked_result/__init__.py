"""checked_result: values or captured failures that must be examined.

Public API:
    - CheckedResult: Holds a value or a captured failure
    - capture() / checked: Wrap raising calls into CheckedResult
    - set_unchecked_failure_sink(): Report unexamined failures instead of aborting
    - ErrorCode / attach_error_code(): Decorate exceptions with system error codes
    - configure(): Pin process-wide settings
"""

from __future__ import annotations

import logging

from checked_result.capture import capture, checked
from checked_result.config import Settings, configure, current_settings
from checked_result.diagnostics import (
    clear_unchecked_failure_sink,
    get_unchecked_failure_sink,
    log_unchecked_failure,
    report_unchecked_failure,
    set_unchecked_failure_sink,
)
from checked_result.error_code import ErrorCode, attach_error_code, error_codes_of
from checked_result.errors import (
    CheckedResultError,
    ConfigurationError,
    NoActiveFailureError,
    SlicedTypeError,
    UnreadFailureViolation,
)
from checked_result.failure import FailureHandle
from checked_result.result import CheckedResult

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("checked-result")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("checked_result").addHandler(logging.NullHandler())

__all__ = [
    "CheckedResult",
    "CheckedResultError",
    "ConfigurationError",
    "ErrorCode",
    "FailureHandle",
    "NoActiveFailureError",
    "Settings",
    "SlicedTypeError",
    "UnreadFailureViolation",
    "attach_error_code",
    "capture",
    "checked",
    "clear_unchecked_failure_sink",
    "configure",
    "current_settings",
    "error_codes_of",
    "get_unchecked_failure_sink",
    "log_unchecked_failure",
    "report_unchecked_failure",
    "set_unchecked_failure_sink",
]
