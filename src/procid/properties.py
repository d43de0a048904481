"""String properties describing the running interpreter and host.

The classifier and resolver only ever see these strings, so tests can hand
them any mapping instead of patching the platform module.
"""

from __future__ import annotations

import os
import platform
import socket
import struct
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

OS_NAME = "os.name"
VM_BITMODE = "vm.bitmode"
DATA_MODEL = "arch.data.model"
VM_VERSION = "vm.version"

OS_NAME_ENV = "PROCID_OS_NAME"
VM_BITMODE_ENV = "PROCID_VM_BITMODE"

# platform.system() values that differ from the conventional OS name
_SYSTEM_NAMES = {"Darwin": "Mac OS X", "SunOS": "SunOS", "Java": "Unknown"}


def _os_name() -> str:
    system = platform.system()
    return _SYSTEM_NAMES.get(system, system)


def system_properties(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect the properties used for platform classification.

    ``vm.bitmode`` is only present when ``PROCID_VM_BITMODE`` is set; the other
    keys are always filled from the running interpreter unless empty.
    """
    env = os.environ if environ is None else environ
    props: dict[str, str] = {}

    os_name = env.get(OS_NAME_ENV) or _os_name()
    if os_name:
        props[OS_NAME] = os_name

    bitmode = env.get(VM_BITMODE_ENV)
    if bitmode:
        props[VM_BITMODE] = bitmode.strip()

    props[DATA_MODEL] = str(struct.calcsize("P") * 8)

    machine = platform.machine()
    if machine:
        props[VM_VERSION] = machine
    return props


def runtime_name() -> str:
    """Return the runtime identifier in ``<pid>@<host>`` form."""
    try:
        host = socket.gethostname()
    except OSError:
        host = "unknown"
    return f"{os.getpid()}@{host}"
