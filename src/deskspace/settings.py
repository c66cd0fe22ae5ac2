"""Settings — reads .env + settings.toml to produce a Settings object.

Every key is optional; a missing settings.toml yields the defaults.
Environment variables (possibly populated from .env) override the TOML
values so a single run can be redirected without editing files.

Key entities:
  - Settings: frozen dataclass with all resolved configuration.
  - load_settings(): parse .env + settings.toml → Settings.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .utils import deskspace_dir

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_DELAY = 0.5
DEFAULT_PROCESS_LIST_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# settings.toml key -> environment override
_ENV_OVERRIDES = {
    "workspaces_dir": "DESKSPACE_WORKSPACES_DIR",
    "launch_delay": "DESKSPACE_LAUNCH_DELAY",
    "log_level": "DESKSPACE_LOG_LEVEL",
}


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Resolved configuration.

    All path attributes are absolute; no further env lookups needed.
    """

    config_dir: Path = field(default_factory=lambda: deskspace_dir())
    workspaces_dir: Path | None = None  # defaults to config_dir / "workspaces"

    # Seconds to wait between two launches during restore
    launch_delay: float = DEFAULT_LAUNCH_DELAY

    # Seconds before the process listing command is abandoned
    process_list_timeout: float = DEFAULT_PROCESS_LIST_TIMEOUT

    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def storage_dir(self) -> Path:
        if self.workspaces_dir is not None:
            return self.workspaces_dir
        return self.config_dir / "workspaces"

    @property
    def settings_file(self) -> Path:
        return self.config_dir / "settings.toml"


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


def load_settings(config_dir: Path | None = None) -> Settings:
    """Read .env + settings.toml and return Settings.

    Args:
        config_dir: Override for the base config directory.
                    Defaults to ``deskspace_dir()``.

    Raises:
        ValueError: settings.toml is malformed or holds an invalid value.
    """
    if config_dir is None:
        config_dir = deskspace_dir()

    # Load .env files (local cwd first, then config_dir)
    local_env = Path(".env")
    global_env = config_dir / ".env"
    if local_env.is_file():
        load_dotenv(local_env)
    if global_env.is_file():
        load_dotenv(global_env)

    raw: dict = {}
    toml_path = config_dir / "settings.toml"
    if toml_path.is_file():
        try:
            with open(toml_path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid settings file {toml_path}: {e}") from e
    else:
        logger.debug("No settings file at %s, using defaults", toml_path)

    def _get(key: str, default):
        """Environment > settings.toml > default."""
        env_name = _ENV_OVERRIDES.get(key)
        if env_name:
            env_value = os.getenv(env_name, "")
            if env_value:
                return env_value
        return raw.get(key, default)

    workspaces_dir = None
    raw_dir = _get("workspaces_dir", "")
    if raw_dir:
        workspaces_dir = Path(str(raw_dir)).expanduser()
        if not workspaces_dir.is_absolute():
            workspaces_dir = config_dir / workspaces_dir

    launch_delay = _parse_float("launch_delay", _get("launch_delay", DEFAULT_LAUNCH_DELAY))
    if launch_delay < 0:
        raise ValueError(f"launch_delay must be >= 0, got {launch_delay}")

    timeout = _parse_float(
        "process_list_timeout",
        _get("process_list_timeout", DEFAULT_PROCESS_LIST_TIMEOUT),
    )
    if timeout <= 0:
        raise ValueError(f"process_list_timeout must be > 0, got {timeout}")

    log_level = str(_get("log_level", DEFAULT_LOG_LEVEL)).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(
            f"log_level must be one of {sorted(_LOG_LEVELS)}, got '{log_level}'"
        )

    return Settings(
        config_dir=config_dir,
        workspaces_dir=workspaces_dir,
        launch_delay=launch_delay,
        process_list_timeout=timeout,
        log_level=log_level,
    )


def _parse_float(key: str, value) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}") from None
