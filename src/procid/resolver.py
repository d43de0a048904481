"""Current process id discovery through an ordered chain of sources."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from procid.config import get_config
from procid.once import Once
from procid.properties import runtime_name

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from procid.config import IdentityConfig

logger = logging.getLogger(__name__)

INT32_MAX = (1 << 31) - 1


def parse_pid(text: str) -> int | None:
    """Parse *text* as a pid; only plain ASCII digits within int32 range count."""
    digits = text.strip()
    if not (digits.isascii() and digits.isdigit()):
        return None
    pid = int(digits)
    if pid > INT32_MAX:
        return None
    return pid


def pid_from_proc_self(path: Path) -> int | None:
    """Read the pid from the final segment of a resolved ``/proc/self`` style link."""
    try:
        if not path.exists():
            return None
        resolved = path.resolve(strict=True)
    except OSError:
        return None
    return parse_pid(resolved.name)


def pid_from_runtime_name(name: str | None = None) -> int | None:
    """Read the pid from a ``<pid>@<host>`` runtime identifier."""
    if name is None:
        name = runtime_name()
    return parse_pid(name.split("@", 1)[0])


@dataclass(frozen=True, slots=True)
class PidSource:
    """A named step in the pid resolution chain."""

    name: str
    fn: Callable[[], int | None]

    def __call__(self) -> int | None:
        return self.fn()


def default_sources(config: IdentityConfig) -> tuple[PidSource, ...]:
    return (
        PidSource("proc_self", partial(pid_from_proc_self, config.proc_self_path)),
        PidSource("runtime_name", pid_from_runtime_name),
    )


def random_pid(bits: int = 16) -> int:
    return secrets.randbelow(1 << bits)


def resolve_process_id(sources: Sequence[PidSource], *, random_bits: int = 16) -> int:
    """Return the first pid any source produces, or a random one if none does.

    Falling back to a random pid is logged as a warning because identifiers
    built from it are no longer guaranteed to be distinct across processes.
    """
    for source in sources:
        pid = source()
        if pid is not None:
            logger.debug("Resolved pid=%s via %s", pid, source.name)
            return pid
        logger.debug("Pid source %s found nothing", source.name)

    rpid = random_pid(random_bits)
    logger.warning("Unable to determine PID, picked a random number=%s", rpid)
    return rpid


def _load_process_id() -> int:
    config = get_config()
    return resolve_process_id(default_sources(config), random_bits=config.random_pid_bits)


_process_id: Once[int] = Once(_load_process_id, name="process_id")


def process_id() -> int:
    """Return the cached pid of this process, resolving it on first use."""
    return _process_id.get()


__all__ = [
    "PidSource",
    "default_sources",
    "parse_pid",
    "pid_from_proc_self",
    "pid_from_runtime_name",
    "process_id",
    "random_pid",
    "resolve_process_id",
]
