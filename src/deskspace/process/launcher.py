"""Application launching and termination.

launch_app() spawns one application without waiting for it.
restore_workspace() launches every app of a workspace in order, pausing
between launches, and keeps going past failures.
kill_process() asks the OS to force-terminate processes by image name.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..workspace.types import App, Workspace
from .ostype import OSType, get_os

logger = logging.getLogger(__name__)

# Pause between two launches so the OS is not hit with a burst of spawns
DEFAULT_LAUNCH_DELAY_S = 0.5

_KILL_TIMEOUT_S = 10

# Characters with special meaning in a POSIX extended regex
_ERE_SPECIAL = frozenset(".[]()*+?{}|^$\\")


@dataclass
class LaunchResult:
    """Outcome of launching one app.

    process is the spawned child's handle; callers may keep it but nothing
    in deskspace waits on it.
    """

    app: App
    process: subprocess.Popen | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.process is not None


@dataclass
class RestoreReport:
    """Per-app results of a restore, in launch order."""

    workspace_name: str
    results: list[LaunchResult] = field(default_factory=list)

    @property
    def launched(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


def launch_app(app: App) -> LaunchResult:
    """Spawn app.command as a detached child process."""
    if not app.executable_path:
        logger.error("✗ Error launching %s: empty executable path", app.name)
        return LaunchResult(app=app, error="empty executable path")

    kwargs: dict = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
    }
    if get_os() == OSType.WINDOWS:
        kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0)
    else:
        # Own session: the app survives the terminal that restored it
        kwargs["start_new_session"] = True

    try:
        process = subprocess.Popen(app.command, **kwargs)
    except (OSError, ValueError) as e:
        logger.error("✗ Error launching %s: %s", app.name, e)
        return LaunchResult(app=app, error=str(e))

    logger.info("✓ Launched: %s (pid %s)", app.name, process.pid)
    return LaunchResult(app=app, process=process)


def restore_workspace(
    workspace: Workspace,
    *,
    delay: float = DEFAULT_LAUNCH_DELAY_S,
    launch: Callable[[App], LaunchResult] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> RestoreReport:
    """Launch every app in workspace order.

    A failed launch is recorded and the remaining apps are still
    launched. The delay is applied between launches, not after the last.
    """
    if launch is None:
        launch = launch_app
    if sleep is None:
        sleep = time.sleep

    logger.info("Restoring workspace: %s", workspace.name)
    report = RestoreReport(workspace_name=workspace.name)

    for i, app in enumerate(workspace.apps):
        if i > 0 and delay > 0:
            sleep(delay)
        report.results.append(launch(app))

    logger.info(
        "Workspace %s restored: %d launched, %d failed",
        workspace.name,
        report.launched,
        report.failed,
    )
    return report


def _command_line_pattern(name: str) -> str:
    """Regex matching command lines whose executable basename is name."""
    escaped = "".join(f"\\{c}" if c in _ERE_SPECIAL else c for c in name)
    return f"^([^ ]*/)?{escaped}( |$)"


def kill_process(name: str, os_type: OSType | None = None) -> bool:
    """Force-terminate all processes named name.

    True means the termination command ran, not that anything matched.
    """
    if not name:
        return False
    if os_type is None:
        os_type = get_os()

    if os_type == OSType.WINDOWS:
        cmd = ["taskkill", "/F", "/IM", name]
    elif os_type == OSType.LINUX:
        # Match the command line, not the 15-character kernel name
        cmd = ["pkill", "-KILL", "-f", _command_line_pattern(name)]
    elif os_type == OSType.MACOS:
        cmd = ["pkill", "-KILL", "-x", name]
    else:
        logger.warning("Killing processes not supported on %s", os_type.value)
        return False

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=_KILL_TIMEOUT_S)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error("✗ Error killing process %s: %s", name, e)
        return False

    if result.returncode != 0:
        logger.debug("%s %s exited with %d", cmd[0], name, result.returncode)
    logger.info("✓ Kill requested: %s", name)
    return True
