"""Running-process enumeration via the OS process listing command.

Windows uses ``tasklist``. Linux uses ``ps -o args=`` and takes the
basename of each process's first argument, since the kernel ``comm``
name is cut to 15 characters. macOS ``ps -o comm=`` already reports the
full executable path. Every call is a fresh query. Any failure to run
the command is logged and yields an empty list.
"""

from __future__ import annotations

import logging
import os
import subprocess

from .ostype import OSType, get_os

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 10.0

_LIST_COMMANDS: dict[OSType, list[str]] = {
    OSType.WINDOWS: ["tasklist"],
    OSType.LINUX: ["ps", "-A", "-ww", "-o", "args="],
    OSType.MACOS: ["ps", "-A", "-o", "comm="],
}


def parse_process_listing(output: str, os_type: OSType) -> list[str]:
    """Extract executable names from the listing command's stdout.

    Windows lines look like ``notepad.exe   1234 Console  1  10,000 K``;
    only first tokens ending in ``.exe`` are kept, which also drops the
    header and separator rows. Linux lines are full command lines whose
    first token is the executable (``[kthreadd]`` for kernel threads).
    macOS lines are executable paths that may contain spaces.
    """
    names: list[str] = []
    for line in output.splitlines():
        parts = line.split()
        if not parts:
            continue
        if os_type == OSType.WINDOWS:
            if parts[0].lower().endswith(".exe"):
                names.append(parts[0])
            continue
        if os_type == OSType.LINUX:
            exe = parts[0]
            if exe.startswith("[") and exe.endswith("]"):
                # Kernel thread names may contain "/"
                names.append(exe[1:-1])
                continue
        else:
            exe = line.strip()
        name = os.path.basename(exe)
        if name:
            names.append(name)
    return names


def capture_running_processes(
    os_type: OSType | None = None,
    timeout: float = _DEFAULT_TIMEOUT_S,
) -> list[str]:
    """Return the names of currently running executables.

    Returns an empty list if the listing command cannot be started or
    times out. Undecodable bytes in its output are replaced, so one odd
    process name does not hide the rest.
    """
    if os_type is None:
        os_type = get_os()

    cmd = _LIST_COMMANDS.get(os_type)
    if cmd is None:
        logger.warning("Process listing not supported on %s", os_type.value)
        return []

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Error capturing processes: %s", e)
        return []

    if result.returncode != 0:
        logger.warning(
            "%s exited with %d: %s",
            cmd[0],
            result.returncode,
            (result.stderr or "").strip(),
        )

    return parse_process_listing(result.stdout or "", os_type)


def is_app_running(name: str, processes: list[str] | None = None) -> bool:
    """Case-insensitive check of name against the running process names.

    A fresh enumeration is performed unless processes is given.
    """
    if processes is None:
        processes = capture_running_processes()
    wanted = name.casefold()
    return any(p.casefold() == wanted for p in processes)
