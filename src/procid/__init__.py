"""procid: process and thread identity for cross-process lock and lease owners."""

from procid.classifier import (
    OsFamily,
    PlatformInfo,
    is_64bit,
    is_linux,
    is_macos,
    is_solaris,
    is_unix,
    is_windows,
    os_family,
    platform_info,
)
from procid.config import IdentityConfig, get_config, set_config
from procid.errors import ConfigError, ProcidError
from procid.once import Once, reset_caches
from procid.packer import pack_tid, split_tid, unique_tid, unique_tid_for
from procid.pid_space import int_log2, pid_bits, pid_max, round_up_pow2
from procid.resolver import process_id

__all__ = [
    "ConfigError",
    "IdentityConfig",
    "Once",
    "OsFamily",
    "PlatformInfo",
    "ProcidError",
    "get_config",
    "int_log2",
    "is_64bit",
    "is_linux",
    "is_macos",
    "is_solaris",
    "is_unix",
    "is_windows",
    "os_family",
    "pack_tid",
    "pid_bits",
    "pid_max",
    "platform_info",
    "process_id",
    "reset_caches",
    "round_up_pow2",
    "set_config",
    "split_tid",
    "unique_tid",
    "unique_tid_for",
]
