from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from accessibility_lab.adapters import CommandError, CommandRunner


def test_run_returns_typed_result(monkeypatch, tmp_path):
    recorded = {}

    def fake_run(args, cwd=None, env=None, capture_output=False, text=False):
        recorded.update(args=args, cwd=cwd, env=env, capture_output=capture_output, text=text)
        return SimpleNamespace(returncode=0, stdout="done\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    runner = CommandRunner(env={"PATH": "/usr/bin"})
    result = runner.run(["gsutil", "-m", "rsync", tmp_path], cwd=tmp_path, capture_output=True)

    assert recorded["args"] == ["gsutil", "-m", "rsync", str(tmp_path)]
    assert recorded["cwd"] == tmp_path
    assert recorded["env"] == {"PATH": "/usr/bin"}
    assert recorded["capture_output"] is True
    assert recorded["text"] is True
    assert result.returncode == 0
    assert result.stdout == "done\n"


def test_non_zero_exit_raises_command_error(monkeypatch):
    def fake_run(args, **_):
        return SimpleNamespace(returncode=3, stdout="", stderr="quota exceeded\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(CommandError) as excinfo:
        CommandRunner().run(["gcloud", "firebase", "test", "android", "run"])

    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "quota exceeded\n"
    assert "exit code 3: quota exceeded" in str(excinfo.value)


def test_missing_executable_raises_command_error(monkeypatch):
    def fake_run(args, **_):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(CommandError, match="Executable not found: mogrify"):
        CommandRunner().run(["mogrify", "-scale", "320x"])
