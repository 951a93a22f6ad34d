"""Tests for the dev-server restart trigger."""

from __future__ import annotations

from pathlib import Path

import pytest

from docs_editor import restart as restart_mod
from docs_editor.config import Settings
from docs_editor.restart import NullRestartSignal, RestartSignal, restart_signal_for


class _Completed:
    def __init__(self, returncode: int) -> None:
        self.returncode = returncode


class TestRestartSignal:
    """Tests for RestartSignal."""

    def test_kills_then_starts(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[str, list[str]]] = []
        monkeypatch.setattr(restart_mod.subprocess, "run", lambda cmd, **kw: calls.append(("run", cmd)) or _Completed(0))
        monkeypatch.setattr(restart_mod.subprocess, "Popen", lambda cmd, **kw: calls.append(("popen", cmd)))

        signal = RestartSignal(["pkill", "-f", "dev"], ["pnpm", "docs:dev"], tmp_path, delay=0)
        signal.notify().join(5)

        assert calls == [("run", ["pkill", "-f", "dev"]), ("popen", ["pnpm", "docs:dev"])]

    def test_nothing_to_kill_is_not_an_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        started: list[list[str]] = []
        monkeypatch.setattr(restart_mod.subprocess, "run", lambda cmd, **kw: _Completed(1))
        monkeypatch.setattr(restart_mod.subprocess, "Popen", lambda cmd, **kw: started.append(cmd))

        RestartSignal(["pkill"], ["start"], tmp_path, delay=0).notify().join(5)

        assert started == [["start"]]

    def test_start_failure_is_swallowed(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(cmd, **kw):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(restart_mod.subprocess, "run", fail)
        monkeypatch.setattr(restart_mod.subprocess, "Popen", fail)

        timer = RestartSignal(["pkill"], ["missing"], tmp_path, delay=0).notify()
        timer.join(5)
        assert not timer.is_alive()


def test_disabled_restart_uses_null_signal(tmp_path: Path) -> None:
    signal = restart_signal_for(Settings.for_root(tmp_path, restart_enabled=False))
    assert isinstance(signal, NullRestartSignal)
    signal.notify()
    assert signal.count == 1


def test_enabled_restart_uses_settings(tmp_path: Path) -> None:
    settings = Settings.for_root(tmp_path, restart_delay=1.5)
    signal = restart_signal_for(settings)
    assert isinstance(signal, RestartSignal)
    assert signal.delay == 1.5
    assert signal.cwd == tmp_path
    assert signal.kill_command == ["pkill", "-f", "vitepress dev"]
