"""Packing of process and thread ids into one 64-bit identifier."""

from __future__ import annotations

import threading

from procid.resolver import process_id

TID_MASK = 0xFFFFFFFF


def pack_tid(pid: int, tid: int) -> int:
    """Put *pid* in the high 32 bits and the low 32 bits of *tid* below it."""
    return (pid << 32) | (tid & TID_MASK)


def split_tid(value: int) -> tuple[int, int]:
    """Inverse of :func:`pack_tid`: return ``(pid, tid)``."""
    return value >> 32, value & TID_MASK


def unique_tid(tid: int | None = None) -> int:
    """Return an id for *tid* that is also distinct across live processes.

    Without *tid* the calling thread's native id is used. Uniqueness across
    processes holds only while their pids are not reused.
    """
    if tid is None:
        tid = threading.get_native_id()
    return pack_tid(process_id(), tid)


def unique_tid_for(thread: threading.Thread) -> int:
    native_id = thread.native_id
    if native_id is None:
        raise ValueError(f"thread {thread.name!r} has not been started")
    return pack_tid(process_id(), native_id)


__all__ = ["TID_MASK", "pack_tid", "split_tid", "unique_tid", "unique_tid_for"]
