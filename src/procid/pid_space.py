"""Pid ceiling lookup and power-of-two sizing for pid bitfields."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from procid.classifier import platform_info
from procid.config import get_config
from procid.once import Once

if TYPE_CHECKING:
    from pathlib import Path

    from procid.classifier import PlatformInfo
    from procid.config import IdentityConfig

logger = logging.getLogger(__name__)


def is_pow2(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def round_up_pow2(n: int) -> int:
    """Return *n* if it is a power of two, otherwise the next power of two above it.

    >>> round_up_pow2(7), round_up_pow2(16), round_up_pow2(17)
    (8, 16, 32)
    """
    if n <= 0:
        raise ValueError(f"cannot round non-positive value {n} to a power of two")
    if is_pow2(n):
        return n
    return 1 << n.bit_length()


def int_log2(n: int) -> int:
    """Return the exact base-2 logarithm of a power of two."""
    if not is_pow2(n):
        raise ValueError(f"{n} is not a power of two")
    return n.bit_length() - 1


def read_pid_max(path: Path) -> int | None:
    """Read a kernel pid ceiling file and round its value up to a power of two.

    Returns None when the file is absent. A file that exists but cannot be
    read, or does not hold a positive integer, is logged as an error and also
    yields None.
    """
    try:
        if not path.exists():
            return None
        text = path.read_text(encoding="ascii")
        n = int(text.split()[0])
        return round_up_pow2(n)
    except (OSError, ValueError, IndexError, UnicodeDecodeError):
        logger.error("Failed to read pid max from %s", path, exc_info=True)
        return None


def compute_pid_max(info: PlatformInfo, config: IdentityConfig) -> int:
    if info.is_linux:
        pid_max = read_pid_max(config.pid_max_path)
        if pid_max is not None:
            return pid_max
    elif info.is_macos:
        return config.macos_pid_max
    return config.default_pid_max


def _load_pid_max() -> int:
    pid_max = compute_pid_max(platform_info(), get_config())
    logger.debug("Pid space size resolved to %s", pid_max)
    return pid_max


_pid_max: Once[int] = Once(_load_pid_max, name="pid_max")
_pid_bits: Once[int] = Once(lambda: int_log2(_pid_max.get()), name="pid_bits")


def pid_max() -> int:
    """Return the platform pid ceiling as a power of two."""
    return _pid_max.get()


def pid_bits() -> int:
    """Return the number of bits needed to hold any pid on this platform."""
    return _pid_bits.get()


__all__ = [
    "compute_pid_max",
    "int_log2",
    "is_pow2",
    "pid_bits",
    "pid_max",
    "read_pid_max",
    "round_up_pow2",
]
