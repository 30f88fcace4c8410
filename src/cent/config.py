"""
config.py — Process-wide configuration

Provides the library defaults using pydantic-settings, so every option can
also come from the environment (prefix CENT_):

    CENT_NUMBER_INPUT_MODE=never
    CENT_DEFAULT_ROUNDING_MODE=half_up
    CENT_STRICT_PRECISION=true

The configuration object is frozen. configure() builds a new one and swaps
it in under a lock, so readers always see a complete, consistent snapshot.
Call it once at startup, before concurrent use begins.
"""

from __future__ import annotations
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional
import logging
import threading

import pydantic
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ValidationError
from .rounding import RoundingMode

logger = logging.getLogger(__name__)


class NumberInputMode(str, Enum):
    """How native float input is treated."""
    ALWAYS = "always"  # accept silently
    WARN = "warn"      # accept, log a warning when the float looks imprecise
    NEVER = "never"    # reject every float input


class CentConfig(BaseSettings):
    """cent library configuration"""

    number_input_mode: NumberInputMode = NumberInputMode.WARN
    # Fallback for operations called without a mode; NONE means "raise instead"
    default_rounding_mode: RoundingMode = RoundingMode.NONE
    # Escalate every lossy rounding to PrecisionLossError
    strict_precision: bool = False
    # Fractional digits beyond which a float input is considered imprecise
    precision_warning_threshold: int = Field(default=15, ge=1)
    default_currency: str = "USD"

    model_config = SettingsConfigDict(env_prefix="CENT_", frozen=True)

    @field_validator("default_rounding_mode", mode="before")
    @classmethod
    def _rounding_mode_by_name(cls, value: Any) -> Any:
        if isinstance(value, str) and value.upper() in RoundingMode.__members__:
            return RoundingMode[value.upper()]
        return value

    @field_validator("default_currency")
    @classmethod
    def _upper_code(cls, value: str) -> str:
        return value.strip().upper()


_lock = threading.RLock()
_config: Optional[CentConfig] = None


def _build(options: dict[str, Any]) -> CentConfig:
    try:
        return CentConfig(**options)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            issues=[
                {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
        ) from e


def get_config() -> CentConfig:
    """Current configuration snapshot (immutable)."""
    global _config
    if _config is None:
        with _lock:
            if _config is None:
                _config = _build({})
    return _config


def configure(**options: Any) -> CentConfig:
    """
    Override configuration options. Unspecified options keep their value.

    Example:
        configure(number_input_mode="never", strict_precision=True)
    """
    global _config
    with _lock:
        current = get_config()
        _config = _build({**current.model_dump(), **options})
        logger.debug("cent configuration updated: %s", sorted(options))
        return _config


def reset_config() -> CentConfig:
    """Restore defaults (environment variables are read again)."""
    global _config
    with _lock:
        _config = _build({})
        return _config


def get_default_config() -> CentConfig:
    """Defaults as they would be after reset_config()."""
    return _build({})


@contextmanager
def with_config(**options: Any) -> Iterator[CentConfig]:
    """
    Temporarily override configuration; the previous snapshot is restored
    on exit, even when the block raises. Intended for tests and scripts, not
    for concurrent code.

        with with_config(default_rounding_mode=RoundingMode.HALF_EVEN):
            Money.parse("$10").divide(3)
    """
    global _config
    with _lock:
        previous = get_config()
        _config = _build({**previous.model_dump(), **options})
    try:
        yield _config
    finally:
        with _lock:
            _config = previous
