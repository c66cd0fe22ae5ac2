"""JSON file persistence for workspaces.

One file per workspace, ``<root>/<name>.json``, written atomically.
The storage root is injected so several stores (or tests) can coexist.

Failures never propagate: save/delete return False, load returns None,
and load_result() reports the reason as a LoadError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..utils import atomic_write_json, is_safe_name
from .types import SchemaError, Workspace

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".json"


class LoadError(Enum):
    INVALID_NAME = "invalid_name"
    NOT_FOUND = "not_found"
    UNREADABLE = "unreadable"
    INCOMPATIBLE_SCHEMA = "incompatible_schema"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading one workspace: exactly one field is set."""

    workspace: Workspace | None = None
    error: LoadError | None = None

    @property
    def ok(self) -> bool:
        return self.workspace is not None


class WorkspaceStore:
    """Reads and writes workspace files under a single directory."""

    def __init__(self, root: Path, suffix: str = DEFAULT_SUFFIX) -> None:
        self.root = root
        self.suffix = suffix

    def path_for(self, name: str) -> Path:
        return self.root / f"{name}{self.suffix}"

    def save(self, workspace: Workspace) -> bool:
        """Persist workspace, replacing any previous file with the same name."""
        if not is_safe_name(workspace.name):
            logger.error("Refusing to save workspace with unsafe name %r", workspace.name)
            return False

        path = self.path_for(workspace.name)
        try:
            atomic_write_json(path, workspace.to_dict())
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving workspace %s: %s", path, e)
            return False

        logger.info("Workspace saved: %s", path)
        return True

    def load_result(self, name: str) -> LoadResult:
        if not is_safe_name(name):
            logger.warning("Invalid workspace name %r", name)
            return LoadResult(error=LoadError.INVALID_NAME)

        path = self.path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Workspace not found: %s", path)
            return LoadResult(error=LoadError.NOT_FOUND)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error reading workspace %s: %s", path, e)
            return LoadResult(error=LoadError.UNREADABLE)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("Corrupt workspace file %s: %s", path, e)
            return LoadResult(error=LoadError.UNREADABLE)

        try:
            workspace = Workspace.from_dict(data)
        except SchemaError as e:
            logger.error("Incompatible workspace file %s: %s", path, e)
            return LoadResult(error=LoadError.INCOMPATIBLE_SCHEMA)

        if workspace.name != name:
            logger.warning(
                "Workspace file %s records name %r, using the file name",
                path,
                workspace.name,
            )
            workspace.name = name

        logger.info("Workspace loaded: %s", path)
        return LoadResult(workspace=workspace)

    def load(self, name: str) -> Workspace | None:
        """Load a workspace by name, or None if missing / unreadable / incompatible."""
        return self.load_result(name).workspace

    def list_names(self) -> list[str]:
        """Return the names of all stored workspaces, sorted."""
        if not self.root.is_dir():
            return []
        try:
            entries = list(self.root.iterdir())
        except OSError as e:
            logger.error("Error listing workspaces in %s: %s", self.root, e)
            return []
        return sorted(
            p.name[: -len(self.suffix)]
            for p in entries
            if p.is_file()
            and p.name.endswith(self.suffix)
            and is_safe_name(p.name[: -len(self.suffix)])
        )

    def delete(self, name: str) -> bool:
        """Remove the stored file for name. False if it did not exist."""
        if not is_safe_name(name):
            logger.warning("Invalid workspace name %r", name)
            return False

        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Error deleting workspace %s: %s", path, e)
            return False

        logger.info("Workspace deleted: %s", path)
        return True
