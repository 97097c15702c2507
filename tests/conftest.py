"""Pytest configuration and fixtures.

Provides environment isolation, a reset of the process-wide sink and
settings between tests, and recorders for the two reporting channels
(strict-mode aborts and registered sinks). All fixtures here are autouse
unless noted.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import suppress
from dataclasses import dataclass, field
import gc
import logging
import os

import pytest

from checked_result import diagnostics
from checked_result.config import ENV_PREFIX, reset_settings_cache
from checked_result.failure import FailureHandle

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class RecordingSink:
    """Sink test double that keeps every handle it is given."""

    handles: list[FailureHandle] = field(default_factory=list)

    def __call__(self, handle: FailureHandle) -> None:
        self.handles.append(handle)

    @property
    def errors(self) -> list[BaseException]:
        return [h.error for h in self.handles]


@dataclass
class AbortRecorder:
    """Stands in for ``os.abort`` so strict-mode violations can be asserted."""

    calls: int = 0

    def __call__(self) -> None:
        self.calls += 1


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Clear CHECKED_RESULT_* variables and cached settings around each test."""
    for key in list(os.environ.keys()):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture(autouse=True)
def isolate_sink():
    """Start and finish every test with no sink registered."""
    diagnostics.clear_unchecked_failure_sink()
    yield
    diagnostics.clear_unchecked_failure_sink()


@pytest.fixture(autouse=True)
def aborts(monkeypatch) -> Iterator[AbortRecorder]:
    """Record strict-mode aborts instead of terminating the test run."""
    recorder = AbortRecorder()
    monkeypatch.setattr(os, "abort", recorder)
    yield recorder
    # Results kept alive by reference cycles must be reported while patched.
    gc.collect()


# =============================================================================
# Opt-in Fixtures
# =============================================================================


@pytest.fixture
def sink() -> RecordingSink:
    """Register a recording sink (logging mode) for the duration of a test."""
    recorder = RecordingSink()
    diagnostics.set_unchecked_failure_sink(recorder)
    return recorder


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Keep debug chatter from the library out of test output by default."""
    logging.getLogger("checked_result").setLevel(logging.INFO)


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "property: Hypothesis-driven property tests",
        "allow_dotenv: Permit python-dotenv to read .env files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
