# tests/test_launcher.py

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from taskdeck.core.errors import LaunchError
from taskdeck.runner.launcher import SubprocessLauncher


def test_exit_status_is_returned_unchanged() -> None:
    status = SubprocessLauncher().launch([sys.executable, "-c", "import sys; sys.exit(3)"])
    assert status == 3


def test_child_gets_cwd_and_env(tmp_path: Path) -> None:
    out = tmp_path / "out.txt"
    code = (
        "import os, pathlib, sys;"
        "pathlib.Path(sys.argv[1]).write_text(os.getcwd() + '|' + os.environ['TASKDECK_MARKER'])"
    )
    env = dict(os.environ, TASKDECK_MARKER="hello world")
    status = SubprocessLauncher().launch([sys.executable, "-c", code, str(out)], cwd=tmp_path, env=env)

    assert status == 0
    cwd, marker = out.read_text().split("|")
    assert Path(cwd).resolve() == tmp_path.resolve()
    assert marker == "hello world"


def test_arguments_reach_child_verbatim(tmp_path: Path) -> None:
    out = tmp_path / "argv.txt"
    code = "import pathlib, sys; pathlib.Path(sys.argv[1]).write_text('\\n'.join(sys.argv[2:]))"
    args = ["two words", "*", "$HOME", ""]
    SubprocessLauncher().launch([sys.executable, "-c", code, str(out), *args])
    assert out.read_text().split("\n") == args


def test_missing_program_raises_launch_error(tmp_path: Path) -> None:
    missing = str(tmp_path / "definitely-not-a-program")
    with pytest.raises(LaunchError) as exc:
        SubprocessLauncher().launch([missing, "--help"])
    assert isinstance(exc.value.error, OSError)
    assert exc.value.argv == [missing, "--help"]


def test_empty_argv_raises_launch_error() -> None:
    with pytest.raises(LaunchError):
        SubprocessLauncher().launch([])


def test_interrupted_wait_terminates_child(monkeypatch: pytest.MonkeyPatch) -> None:
    children: list[subprocess.Popen] = []
    real_wait = subprocess.Popen.wait

    def wait_interrupted_once(self: subprocess.Popen, timeout: float | None = None) -> int:
        if not any(child is self for child in children):
            children.append(self)
            raise KeyboardInterrupt
        return real_wait(self, timeout=timeout)

    monkeypatch.setattr(subprocess.Popen, "wait", wait_interrupted_once)

    with pytest.raises(KeyboardInterrupt):
        SubprocessLauncher(terminate_timeout=5.0).launch([sys.executable, "-c", "import time; time.sleep(60)"])

    assert len(children) == 1
    assert children[0].poll() is not None
