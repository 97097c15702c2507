"""Process-wide settings for unchecked-failure reporting.

Resolution follows defaults < environment < overrides. The environment is
read from ``CHECKED_RESULT_*`` variables after an optional ``.env`` file has
been loaded once via python-dotenv. Resolved settings are cached; the cache
is the single configuration value consulted when a violation is reported.
"""

from __future__ import annotations

from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from checked_result.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "CHECKED_RESULT_"

UncheckedMode = Literal["strict", "log"]

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

_DOTENV_LOADED = False
_pinned: dict[str, Any] | None = None


class Settings(BaseModel):
    """Schema for checked_result configuration.

    ``unchecked_mode`` decides what happens when a failure is discarded
    without being examined and no sink has been registered explicitly:
    ``"strict"`` aborts the process, ``"log"`` reports through the logging
    sink and continues.
    """

    unchecked_mode: UncheckedMode = Field(default="strict")
    log_level: str = Field(default="ERROR")

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("unchecked_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> Any:
        """Accept any casing and surrounding whitespace."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().upper()
            if v == "WARN":
                v = "WARNING"
        if v not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return v

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once, tolerating its absence."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    from dotenv import find_dotenv, load_dotenv

    load_dotenv(find_dotenv(usecwd=True))


def load_env() -> dict[str, str]:
    """Read ``CHECKED_RESULT_*`` variables that name a Settings field."""
    values: dict[str, str] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            values[field_name] = value
    return values


def resolve_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Resolve settings from defaults, environment and ``overrides``.

    Raises:
        ConfigurationError: If a value fails validation.
    """
    _try_load_dotenv()
    merged: dict[str, Any] = {**load_env(), **(overrides or {})}
    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg") or "invalid value"
        if msg.startswith("Value error, "):
            msg = msg[13:]
        raise ConfigurationError(
            f"Invalid checked_result setting {field!r}: {msg}",
            hint=f"Check the {ENV_PREFIX}{field.upper()} environment variable.",
        ) from e


@cache
def current_settings() -> Settings:
    """Return the process-wide settings, resolving them on first use."""
    settings = resolve_settings(_pinned)
    log.debug("Resolved settings: %s", settings)
    return settings


def configure(**overrides: Any) -> Settings:
    """Pin settings programmatically; they take precedence over the environment."""
    global _pinned
    settings = resolve_settings(overrides)
    _pinned = dict(overrides)
    current_settings.cache_clear()
    return settings


def reset_settings_cache() -> None:
    """Forget pinned overrides and re-read the environment on next use."""
    global _pinned
    _pinned = None
    current_settings.cache_clear()
