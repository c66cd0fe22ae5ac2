"""Data models for workspaces."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

# Bump when the on-disk document shape changes
SCHEMA_VERSION = 1


class SchemaError(ValueError):
    """A stored document does not match the expected workspace shape."""


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise SchemaError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class App:
    """One application launch specification."""

    name: str  # display label, not required unique
    executable_path: str  # command or path to run
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable (lists from callers / JSON) but store a tuple
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def command(self) -> list[str]:
        return [self.executable_path, *self.args]

    def __str__(self) -> str:
        return f"{self.name} ({self.executable_path})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "executable_path": self.executable_path,
            "args": list(self.args),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> App:
        if not isinstance(data, dict):
            raise SchemaError("app entry must be an object")
        args = data.get("args", [])
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise SchemaError("'args' must be a list of strings")
        return cls(
            name=_require_str(data, "name"),
            executable_path=_require_str(data, "executable_path"),
            args=tuple(args),
        )


@dataclass
class Workspace:
    """A named, ordered collection of apps plus its creation time."""

    name: str  # also the storage key
    apps: list[App] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)  # Unix seconds

    def __str__(self) -> str:
        return f"{self.name} ({len(self.apps)} apps)"

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": SCHEMA_VERSION,
            "name": self.name,
            "timestamp": self.timestamp,
            "apps": [a.to_dict() for a in self.apps],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Workspace:
        """Rebuild a Workspace, raising SchemaError on any shape mismatch."""
        if not isinstance(data, dict):
            raise SchemaError("workspace document must be an object")
        version = data.get("version")
        if version != SCHEMA_VERSION:
            raise SchemaError(
                f"unsupported schema version {version!r} (expected {SCHEMA_VERSION})"
            )
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise SchemaError("'timestamp' must be a number")
        apps = data.get("apps")
        if not isinstance(apps, list):
            raise SchemaError("'apps' must be a list")
        return cls(
            name=_require_str(data, "name"),
            apps=[App.from_dict(a) for a in apps],
            timestamp=float(timestamp),
        )
