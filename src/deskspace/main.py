"""Application entry point — CLI dispatcher.

Commands:
  save NAME --app LABEL "COMMAND [ARG ...]"  store a workspace (replaces same name)
  load NAME                                 show a stored workspace
  restore NAME                              launch every app of a stored workspace
  list                                      list stored workspace names
  delete NAME                               remove a stored workspace
  ps                                        list running executable names
  running NAME                              exit 0 if NAME is running
  kill NAME                                 force-terminate processes named NAME

Global option --remember (with --config-dir) makes that directory the default
for later runs.

Exit code is 0 on success and 1 when the underlying operation fails.
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from datetime import datetime
from pathlib import Path

from . import __version__
from .utils import save_dir_pointer
from .workspace.store import LoadError
from .workspace.types import App

logger = logging.getLogger(__name__)

_LOAD_ERROR_MESSAGES = {
    LoadError.INVALID_NAME: "is not a valid workspace name",
    LoadError.NOT_FOUND: "was not found",
    LoadError.UNREADABLE: "could not be read",
    LoadError.INCOMPATIBLE_SCHEMA: "was saved in an incompatible format",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deskspace",
        description="Save a set of applications as a named workspace and relaunch it later.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="config directory (default: $DESKSPACE_DIR or ~/.deskspace)",
    )
    parser.add_argument(
        "--remember",
        action="store_true",
        help="make --config-dir the default for later runs",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("save", help="save a workspace")
    p.add_argument("name")
    p.add_argument(
        "--app",
        nargs=2,
        action="append",
        default=[],
        metavar=("LABEL", "COMMAND_LINE"),
        help=(
            "an app to include: display label and a quoted command line, "
            "e.g. --app Code 'code --new-window /src' (repeatable)"
        ),
    )

    p = sub.add_parser("load", help="show a saved workspace")
    p.add_argument("name")

    p = sub.add_parser("restore", help="launch every app of a saved workspace")
    p.add_argument("name")

    sub.add_parser("list", help="list saved workspaces")

    p = sub.add_parser("delete", help="delete a saved workspace")
    p.add_argument("name")

    sub.add_parser("ps", help="list running executables")

    p = sub.add_parser("running", help="check whether an executable is running")
    p.add_argument("name")

    p = sub.add_parser("kill", help="force-terminate processes by executable name")
    p.add_argument("name")

    return parser


def _parse_apps(raw: list[list[str]]) -> list[App]:
    """Turn ``--app LABEL COMMAND_LINE`` pairs into Apps.

    The command line is split with shell quoting rules, so arguments that
    start with ``-`` or contain spaces survive intact.
    """
    apps: list[App] = []
    for label, command_line in raw:
        try:
            tokens = shlex.split(command_line)
        except ValueError as e:
            raise ValueError(f"--app {label}: cannot parse {command_line!r}: {e}") from e
        if not tokens:
            raise ValueError(f"--app {label}: needs a command")
        command, *args = tokens
        apps.append(App(label, command, tuple(args)))
    return apps


def _remember_config_dir(config_dir: Path | None) -> int:
    if config_dir is None:
        print("Error: --remember needs --config-dir.", file=sys.stderr)
        return 1
    target = config_dir.expanduser().resolve()
    try:
        save_dir_pointer(target)
    except OSError as e:
        print(f"Error: could not remember {target}: {e}", file=sys.stderr)
        return 1
    logger.info("Remembered config directory %s", target)
    return 0


def _print_load_error(name: str, error: LoadError | None) -> None:
    reason = _LOAD_ERROR_MESSAGES.get(error, "could not be loaded")
    print(f"Error: workspace '{name}' {reason}.", file=sys.stderr)


def _cmd_save(manager, args: argparse.Namespace) -> int:
    apps = _parse_apps(args.app)
    workspace = manager.create_workspace(args.name, apps)
    if not manager.save_workspace(workspace):
        print(f"Error: could not save workspace '{args.name}'.", file=sys.stderr)
        return 1
    print(f"Saved {workspace} to {manager.store.path_for(workspace.name)}")
    return 0


def _cmd_load(manager, args: argparse.Namespace) -> int:
    result = manager.load_workspace_result(args.name)
    if result.workspace is None:
        _print_load_error(args.name, result.error)
        return 1
    ws = result.workspace
    created = datetime.fromtimestamp(ws.timestamp).strftime("%Y-%m-%d %H:%M:%S")
    print(f"{ws}, created {created}")
    for app in ws.apps:
        line = f"  - {app}"
        if app.args:
            line += " " + shlex.join(app.args)
        print(line)
    return 0


def _cmd_restore(manager, args: argparse.Namespace) -> int:
    result = manager.load_workspace_result(args.name)
    if result.workspace is None:
        _print_load_error(args.name, result.error)
        return 1
    report = manager.restore_workspace(result.workspace)
    for r in report.results:
        mark = "✓" if r.ok else "✗"
        suffix = "" if r.ok else f": {r.error}"
        print(f"{mark} {r.app.name}{suffix}")
    print(
        f"Restored '{report.workspace_name}': "
        f"{report.launched} launched, {report.failed} failed"
    )
    return 0


def _cmd_list(manager, args: argparse.Namespace) -> int:
    for name in manager.list_workspaces():
        print(name)
    return 0


def _cmd_delete(manager, args: argparse.Namespace) -> int:
    if not manager.delete_workspace(args.name):
        print(f"Error: workspace '{args.name}' was not deleted.", file=sys.stderr)
        return 1
    print(f"Deleted workspace '{args.name}'")
    return 0


def _cmd_ps(manager, args: argparse.Namespace) -> int:
    for name in manager.capture_running_processes():
        print(name)
    return 0


def _cmd_running(manager, args: argparse.Namespace) -> int:
    running = manager.is_app_running(args.name)
    print(f"{args.name} is {'running' if running else 'not running'}")
    return 0 if running else 1


def _cmd_kill(manager, args: argparse.Namespace) -> int:
    if not manager.kill_process(args.name):
        print(f"Error: could not kill '{args.name}'.", file=sys.stderr)
        return 1
    print(f"Kill requested for '{args.name}'")
    return 0


_COMMANDS = {
    "save": _cmd_save,
    "load": _cmd_load,
    "restore": _cmd_restore,
    "list": _cmd_list,
    "delete": _cmd_delete,
    "ps": _cmd_ps,
    "running": _cmd_running,
    "kill": _cmd_kill,
}


def run(argv: list[str] | None = None) -> int:
    """Parse argv, execute one command and return its exit code."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
    )

    from .settings import load_settings
    from .workspace.manager import WorkspaceManager

    if args.remember and _remember_config_dir(args.config_dir) != 0:
        return 1

    try:
        settings = load_settings(config_dir=args.config_dir)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Check your settings.toml configuration.", file=sys.stderr)
        return 1

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level)
    logging.getLogger("deskspace").setLevel(level)
    logger.debug("Using workspaces dir %s", settings.storage_dir)

    manager = WorkspaceManager.from_settings(settings)
    try:
        return _COMMANDS[args.command](manager, args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
