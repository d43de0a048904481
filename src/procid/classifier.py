"""Operating system family and bitness classification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from procid.once import Once
from procid.properties import DATA_MODEL, OS_NAME, VM_BITMODE, VM_VERSION, system_properties

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_UNIX_TOKENS = ("nix", "nux", "aix", "bsd", "hpux")


class OsFamily(StrEnum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    SOLARIS = "solaris"
    OTHER_UNIX = "other_unix"
    UNKNOWN = "unknown"


def classify_os(name: str | None) -> OsFamily:
    """Map an OS name such as ``"Windows 10"`` or ``"FreeBSD"`` to its family."""
    os_name = (name or "").lower()
    if os_name.startswith("win"):
        return OsFamily.WINDOWS
    if "mac" in os_name:
        return OsFamily.MACOS
    if os_name.startswith("linux"):
        return OsFamily.LINUX
    if os_name.startswith("sun"):
        return OsFamily.SOLARIS
    if any(token in os_name for token in _UNIX_TOKENS):
        return OsFamily.OTHER_UNIX
    return OsFamily.UNKNOWN


def detect_64bit(props: Mapping[str, str]) -> bool:
    """Return True when the first available bitness signal says 64-bit.

    Signals are checked in order: vendor bitmode, data model, VM version. An
    absent signal defers to the next one; with none present the answer is False.
    """
    bitmode = props.get(VM_BITMODE)
    if bitmode is not None:
        return bitmode == "64"
    data_model = props.get(DATA_MODEL)
    if data_model is not None:
        return data_model == "64"
    vm_version = props.get(VM_VERSION)
    return vm_version is not None and "_64" in vm_version


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Immutable description of the platform the process started on."""

    os_name: str
    os_family: OsFamily
    is_64bit: bool

    @classmethod
    def from_properties(cls, props: Mapping[str, str]) -> PlatformInfo:
        os_name = (props.get(OS_NAME) or "").lower()
        return cls(os_name=os_name, os_family=classify_os(os_name), is_64bit=detect_64bit(props))

    @property
    def is_windows(self) -> bool:
        return self.os_name.startswith("win")

    @property
    def is_macos(self) -> bool:
        return "mac" in self.os_name

    @property
    def is_linux(self) -> bool:
        return self.os_name.startswith("linux")

    @property
    def is_solaris(self) -> bool:
        return self.os_name.startswith("sun")

    @property
    def is_unix(self) -> bool:
        """Substring match over common Unix names; Linux counts as Unix here."""
        return any(token in self.os_name for token in _UNIX_TOKENS)


def _load_platform_info() -> PlatformInfo:
    info = PlatformInfo.from_properties(system_properties())
    logger.debug(
        "Platform resolved: os=%r family=%s 64bit=%s",
        info.os_name,
        info.os_family.value,
        info.is_64bit,
    )
    return info


_platform_info: Once[PlatformInfo] = Once(_load_platform_info, name="platform_info")


def platform_info() -> PlatformInfo:
    return _platform_info.get()


def is_64bit() -> bool:
    return _platform_info.get().is_64bit


def os_family() -> OsFamily:
    return _platform_info.get().os_family


def is_windows() -> bool:
    return _platform_info.get().is_windows


def is_macos() -> bool:
    return _platform_info.get().is_macos


def is_linux() -> bool:
    return _platform_info.get().is_linux


def is_solaris() -> bool:
    return _platform_info.get().is_solaris


def is_unix() -> bool:
    return _platform_info.get().is_unix


__all__ = [
    "OsFamily",
    "PlatformInfo",
    "classify_os",
    "detect_64bit",
    "is_64bit",
    "is_linux",
    "is_macos",
    "is_solaris",
    "is_unix",
    "is_windows",
    "os_family",
    "platform_info",
]
