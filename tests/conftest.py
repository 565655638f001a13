# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskdeck.core.models import Alias, Task
from taskdeck.core.registry import TaskRegistry

from .fakes import RecordingLauncher

TASKFILE_TEXT = """\
[tasks.run]
description = "Build and run the service"
command = ["cargo", "run", "--locked", "{{args}}"]

[tasks.check]
command = "cargo clippy --locked {{args}}"

[tasks.test]
command = "cargo test --locked {{args}}"

[tasks.psql]
command = 'psql "$DATABASE_URL" {{args}}'

[tasks._default]
command = "taskdeck --list"

[aliases]
r = "run"
c = "check"
t = "test"
p = "psql"
"""


@pytest.fixture()
def registry() -> TaskRegistry:
    """Sealed registry mirroring the example taskfile, built directly from models."""
    reg = TaskRegistry()
    reg.register(Task.from_tokens("run", ["cargo", "run", "--locked", "{{args}}"], "Build and run"))
    reg.register(Task.from_tokens("check", ["cargo", "clippy", "--locked", "{{args}}"]))
    reg.register(Task.from_tokens("test", ["cargo", "test", "--locked", "{{args}}"]))
    reg.register(Task.from_tokens("psql", ["psql", "$DATABASE_URL", "{{args}}"]))
    reg.register_alias(Alias("r", "run"))
    reg.register_alias(Alias("c", "check"))
    reg.register_alias(Alias("t", "test"))
    reg.register_alias(Alias("p", "psql"))
    reg.seal()
    return reg


@pytest.fixture()
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture()
def taskfile_path(tmp_path: Path) -> Path:
    path = tmp_path / "taskdeck.toml"
    path.write_text(TASKFILE_TEXT, "utf-8")
    return path
