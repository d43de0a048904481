"""Configuration for identity resolution: lookup paths and pid ceilings."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from procid.errors import ConfigError
from procid.once import reset_caches

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROCID_"

DEFAULT_PROC_SELF_PATH = Path("/proc/self")
DEFAULT_PID_MAX_PATH = Path("/proc/sys/kernel/pid_max")
DEFAULT_PID_MAX = 1 << 16
MACOS_PID_MAX = 1 << 24
DEFAULT_RANDOM_PID_BITS = 16

# field name -> environment variable
_ENV_FIELDS: dict[str, str] = {
    "proc_self_path": f"{ENV_PREFIX}PROC_SELF_PATH",
    "pid_max_path": f"{ENV_PREFIX}PID_MAX_PATH",
    "default_pid_max": f"{ENV_PREFIX}DEFAULT_PID_MAX",
    "macos_pid_max": f"{ENV_PREFIX}MACOS_PID_MAX",
    "random_pid_bits": f"{ENV_PREFIX}RANDOM_PID_BITS",
}


class IdentityConfig(BaseModel):
    """Where to look for process identity and which ceilings to assume."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    proc_self_path: Path = Field(
        default=DEFAULT_PROC_SELF_PATH,
        description="Self-referential process handle whose canonical name is the pid",
    )
    pid_max_path: Path = Field(
        default=DEFAULT_PID_MAX_PATH,
        description="Linux kernel file holding the maximum pid value",
    )
    default_pid_max: int = Field(
        default=DEFAULT_PID_MAX,
        description="Pid ceiling used when the platform does not report one",
    )
    macos_pid_max: int = Field(default=MACOS_PID_MAX, description="Fixed pid ceiling on macOS")
    random_pid_bits: int = Field(
        default=DEFAULT_RANDOM_PID_BITS,
        ge=1,
        le=31,
        description="Width of the random pid picked when no pid source is available",
    )

    @field_validator("default_pid_max", "macos_pid_max")
    @classmethod
    def validate_power_of_two(cls, value: int) -> int:
        if value <= 0 or value & (value - 1):
            raise ValueError("must be a positive power of two")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> IdentityConfig:
        """Build a config from ``PROCID_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        raw: dict[str, str] = {}
        for field, var in _ENV_FIELDS.items():
            value = env.get(var)
            if value is not None and value.strip():
                raw[field] = value.strip()
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "config"
            raise ConfigError(_ENV_FIELDS.get(field, field), error["msg"]) from exc


_config_lock = threading.Lock()
_config: IdentityConfig | None = None


def get_config() -> IdentityConfig:
    """Return the process-wide config, reading the environment on first use.

    An invalid override is logged and the defaults are used instead, so identity
    resolution keeps working. Call ``IdentityConfig.from_env()`` directly to
    validate strictly.
    """
    global _config
    config = _config
    if config is not None:
        return config
    with _config_lock:
        if _config is None:
            try:
                _config = IdentityConfig.from_env()
            except ConfigError:
                logger.error("Ignoring invalid procid configuration", exc_info=True)
                _config = IdentityConfig()
        return _config


def set_config(config: IdentityConfig | None) -> None:
    """Replace the process-wide config and drop every value derived from it.

    Passing None makes the next ``get_config()`` re-read the environment.
    """
    global _config
    with _config_lock:
        _config = config
    reset_caches()


__all__ = [
    "DEFAULT_PID_MAX",
    "DEFAULT_PID_MAX_PATH",
    "DEFAULT_PROC_SELF_PATH",
    "MACOS_PID_MAX",
    "IdentityConfig",
    "get_config",
    "set_config",
]
