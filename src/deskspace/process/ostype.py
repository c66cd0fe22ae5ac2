"""Host OS detection.

The process helpers pick their listing and kill commands by OSType, so
tests can exercise every platform's branch from any host.
"""

import platform
from enum import Enum


class OSType(Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    UNKNOWN = "unknown"


# platform.system() values, lowercased
_SYSTEMS = {
    "windows": OSType.WINDOWS,
    "linux": OSType.LINUX,
    "darwin": OSType.MACOS,
}


def get_os() -> OSType:
    return _SYSTEMS.get(platform.system().lower(), OSType.UNKNOWN)
