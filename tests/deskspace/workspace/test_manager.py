"""Tests for workspace/manager.py — WorkspaceManager."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from deskspace.process.launcher import LaunchResult
from deskspace.settings import Settings
from deskspace.workspace.manager import WorkspaceManager
from deskspace.workspace.store import WorkspaceStore
from deskspace.workspace.types import App


@pytest.fixture
def manager(tmp_path: Path) -> WorkspaceManager:
    return WorkspaceManager(WorkspaceStore(tmp_path / "workspaces"), launch_delay=0)


def _homework_apps() -> list[App]:
    return [
        App("Notepad", "notepad"),
        App("Chrome", "chrome", ["https://a.com", "https://b.com"]),
    ]


class TestCreateWorkspace:
    def test_sets_fields(self, manager: WorkspaceManager):
        ws = manager.create_workspace("homework", _homework_apps())
        assert ws.name == "homework"
        assert ws.apps == _homework_apps()
        assert ws.timestamp > 0

    def test_empty_apps_allowed(self, manager: WorkspaceManager):
        assert manager.create_workspace("blank", []).apps == []

    def test_accepts_iterables(self, manager: WorkspaceManager):
        ws = manager.create_workspace("gen", (a for a in _homework_apps()))
        assert len(ws.apps) == 2


class TestLifecycle:
    def test_homework_scenario(self, manager: WorkspaceManager):
        ws = manager.create_workspace("homework", _homework_apps())
        assert manager.save_workspace(ws) is True
        assert "homework" in manager.list_workspaces()

        loaded = manager.load_workspace("homework")
        assert loaded == ws
        assert loaded.apps[1].args == ("https://a.com", "https://b.com")

        assert manager.delete_workspace("homework") is True
        assert "homework" not in manager.list_workspaces()
        assert manager.load_workspace("homework") is None

    def test_save_twice_single_entry(self, manager: WorkspaceManager):
        ws = manager.create_workspace("focus", [App("Term", "xterm")])
        manager.save_workspace(ws)
        manager.save_workspace(ws)
        assert manager.list_workspaces().count("focus") == 1


class TestRestore:
    def test_restore_by_name(self, manager: WorkspaceManager):
        manager.save_workspace(manager.create_workspace("homework", _homework_apps()))
        launched: list[str] = []

        def fake_launch(app: App) -> LaunchResult:
            launched.append(app.name)
            return LaunchResult(app=app, process=MagicMock())

        with patch("deskspace.process.launcher.launch_app", side_effect=fake_launch):
            report = manager.restore_workspace("homework")

        assert report is not None
        assert launched == ["Notepad", "Chrome"]
        assert report.launched == 2

    def test_restore_missing_name(self, manager: WorkspaceManager):
        with patch("deskspace.process.launcher.launch_app") as mock_launch:
            assert manager.restore_workspace("ghost") is None
        mock_launch.assert_not_called()

    def test_restore_uses_configured_delay(self, tmp_path: Path):
        mgr = WorkspaceManager(WorkspaceStore(tmp_path), launch_delay=1.5)
        ws = mgr.create_workspace("two", [App("a", "a"), App("b", "b")])
        with (
            patch(
                "deskspace.process.launcher.launch_app",
                side_effect=lambda app: LaunchResult(app=app, process=MagicMock()),
            ),
            patch("deskspace.process.launcher.time.sleep") as mock_sleep,
        ):
            mgr.restore_workspace(ws)
        mock_sleep.assert_called_once_with(1.5)


class TestProcesses:
    def test_is_app_running_case_insensitive(self, manager: WorkspaceManager):
        with patch(
            "deskspace.process.enumerator.capture_running_processes",
            return_value=["notepad.exe"],
        ):
            assert manager.is_app_running("NOTEPAD.EXE") is True
            assert manager.is_app_running("calc.exe") is False

    def test_capture_passes_timeout(self, tmp_path: Path):
        mgr = WorkspaceManager(WorkspaceStore(tmp_path), process_list_timeout=3.0)
        with patch(
            "deskspace.process.enumerator.capture_running_processes",
            return_value=[],
        ) as mock_capture:
            mgr.capture_running_processes()
        mock_capture.assert_called_once_with(timeout=3.0)

    def test_kill_delegates(self, manager: WorkspaceManager):
        with patch("deskspace.process.launcher.kill_process", return_value=True) as mock_kill:
            assert manager.kill_process("firefox") is True
        mock_kill.assert_called_once_with("firefox")


class TestFromSettings:
    def test_uses_settings(self, tmp_path: Path):
        settings = Settings(
            config_dir=tmp_path,
            launch_delay=2.0,
            process_list_timeout=4.0,
        )
        mgr = WorkspaceManager.from_settings(settings)
        assert mgr.store.root == tmp_path / "workspaces"
        assert mgr.launch_delay == 2.0
        assert mgr.process_list_timeout == 4.0
