"""Shared helpers: config directory resolution, atomic JSON writes, name checks.

Key functions:
  - deskspace_dir(): resolve the config directory (env > pointer file > default).
  - save_dir_pointer(): persist a custom config directory for later runs.
  - atomic_write_json(): write JSON via temp file + os.replace.
  - is_safe_name(): check that a workspace name is usable as a filename stem.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DIR_ENV_VAR = "DESKSPACE_DIR"

# Remembers a custom config dir chosen by the user
_DIR_POINTER_FILE = Path.home() / ".config" / "deskspace" / "dir"

_SAFE_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\- ]*$")

MAX_NAME_LENGTH = 100


def deskspace_dir() -> Path:
    """Return the deskspace config directory.

    Resolution order: $DESKSPACE_DIR, then the pointer file written by
    save_dir_pointer(), then ~/.deskspace.
    """
    env = os.environ.get(_DIR_ENV_VAR)
    if env:
        return Path(env).expanduser()

    try:
        pointed = _DIR_POINTER_FILE.read_text(encoding="utf-8").strip()
    except OSError:
        pointed = ""
    if pointed:
        return Path(pointed).expanduser()

    return Path.home() / ".deskspace"


def save_dir_pointer(config_dir: Path) -> None:
    """Remember config_dir so deskspace_dir() resolves it without the env var."""
    _DIR_POINTER_FILE.parent.mkdir(parents=True, exist_ok=True)
    _DIR_POINTER_FILE.write_text(str(config_dir) + "\n", encoding="utf-8")


def atomic_write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Write data as JSON to path atomically.

    The payload goes to a hidden temp file in the same directory which is
    then moved over the target, so readers never observe a partial file.
    Parent directories are created as needed. Raises OSError / TypeError
    on failure after removing the temp file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def is_safe_name(name: str) -> bool:
    """Return True if name can be used verbatim as a filename stem."""
    if not name or len(name) > MAX_NAME_LENGTH:
        return False
    if name.endswith((".", " ")):
        return False
    return _SAFE_NAME_RE.match(name) is not None
