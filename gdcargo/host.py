"""Host platform detection.

Renders the machine gdcargo runs on as a canonical target string, e.g.
``linux-x86_64`` or ``osx-aarch64``. The result is used wherever a command
leaves its target unspecified.
"""

from __future__ import annotations

import platform

_SYSTEMS: dict[str, str] = {
    "linux": "linux",
    "darwin": "osx",
    "windows": "windows",
}

_MACHINES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
}


def get_current_platform(system: str | None = None, machine: str | None = None) -> str:
    """Return ``<os>-<arch>`` for the host, or for the given overrides.

    Unknown systems and machines are passed through lower-cased so the
    caller can still see what was detected.

    Examples::

        get_current_platform("Linux", "x86_64")  -> "linux-x86_64"
        get_current_platform("Darwin", "arm64")  -> "osx-aarch64"
        get_current_platform("Windows", "AMD64") -> "windows-x86_64"
    """
    system = (system if system is not None else platform.system()).lower()
    machine = (machine if machine is not None else platform.machine()).lower()
    return f"{_SYSTEMS.get(system, system)}-{_MACHINES.get(machine, machine)}"
