"""Workspace assembly and orchestration.

WorkspaceManager ties the store and the process helpers together:
  - create_workspace() builds a Workspace from a name and apps.
  - save/load/list/delete delegate to WorkspaceStore.
  - restore_workspace() loads (if needed) and launches every app.
  - capture_running_processes / is_app_running / kill_process wrap the
    process package.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..process import enumerator, launcher
from .store import LoadResult, WorkspaceStore
from .types import App, Workspace

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """Saves, loads and restores workspaces kept in one store."""

    def __init__(
        self,
        store: WorkspaceStore,
        *,
        launch_delay: float = launcher.DEFAULT_LAUNCH_DELAY_S,
        process_list_timeout: float = 10.0,
    ) -> None:
        self.store = store
        self.launch_delay = launch_delay
        self.process_list_timeout = process_list_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> WorkspaceManager:
        return cls(
            WorkspaceStore(settings.storage_dir),
            launch_delay=settings.launch_delay,
            process_list_timeout=settings.process_list_timeout,
        )

    # --- Assembly ---

    def create_workspace(self, name: str, apps: Iterable[App]) -> Workspace:
        return Workspace(name=name, apps=list(apps), timestamp=time.time())

    # --- Persistence ---

    def save_workspace(self, workspace: Workspace) -> bool:
        return self.store.save(workspace)

    def load_workspace(self, name: str) -> Workspace | None:
        return self.store.load(name)

    def load_workspace_result(self, name: str) -> LoadResult:
        return self.store.load_result(name)

    def list_workspaces(self) -> list[str]:
        return self.store.list_names()

    def delete_workspace(self, name: str) -> bool:
        return self.store.delete(name)

    # --- Restore ---

    def restore_workspace(
        self, workspace: Workspace | str
    ) -> launcher.RestoreReport | None:
        """Launch all apps of workspace (or of the stored workspace with that name).

        Returns None only when a name was given and could not be loaded.
        """
        if isinstance(workspace, str):
            loaded = self.store.load(workspace)
            if loaded is None:
                return None
            workspace = loaded
        return launcher.restore_workspace(workspace, delay=self.launch_delay)

    # --- Processes ---

    def capture_running_processes(self) -> list[str]:
        return enumerator.capture_running_processes(timeout=self.process_list_timeout)

    def is_app_running(self, name: str) -> bool:
        return enumerator.is_app_running(name, self.capture_running_processes())

    def kill_process(self, name: str) -> bool:
        return launcher.kill_process(name)
