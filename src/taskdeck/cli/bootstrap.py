# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- locates and loads the taskfile once,
- builds and seals the TaskRegistry,
- prepares the child environment (os.environ + optional .env beside the taskfile),
- wires a Dispatcher with a concrete ProcessLauncher.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from ..config import Settings
from ..core.dispatcher import Dispatcher
from ..core.errors import TaskfileError
from ..core.ports import CommandEmitter, ProcessLauncher
from ..core.registry import TaskRegistry
from ..runner.launcher import SubprocessLauncher
from ..taskfile import Taskfile, build_registry, find_taskfile, load_taskfile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AppState:
    settings: Settings
    taskfile: Taskfile
    registry: TaskRegistry
    env: dict[str, str]


def locate_taskfile(settings: Settings, override: Path | None = None, *, cwd: Path | None = None) -> Path:
    """Explicit path (CLI flag, then TASKDECK_TASKFILE) or an upward search from cwd."""
    explicit = override or settings.taskfile
    if explicit is not None:
        return Path(explicit)

    start = cwd or Path.cwd()
    found = find_taskfile(start, settings.taskfile_name)
    if found is None:
        raise TaskfileError(None, f"no {settings.taskfile_name} found in {start} or any parent directory")
    return found


def child_environment(taskfile: Taskfile, *, dotenv_load: bool) -> dict[str, str]:
    """
    Environment handed to every child process.

    Values from a .env next to the taskfile fill gaps only; variables already set win.
    """
    env: dict[str, str] = {}
    directory = taskfile.directory
    if dotenv_load and directory is not None:
        dotenv_path = directory / ".env"
        if dotenv_path.is_file():
            values = dotenv_values(dotenv_path)
            env.update({k: v for k, v in values.items() if v is not None})
            logger.debug("Loaded %d variables from %s", len(env), dotenv_path)
    env.update(os.environ)
    return env


def create_initial_state(settings: Settings, *, taskfile_path: Path | None = None, cwd: Path | None = None) -> AppState:
    path = locate_taskfile(settings, taskfile_path, cwd=cwd)
    taskfile = load_taskfile(path)
    registry = build_registry(taskfile)
    env = child_environment(taskfile, dotenv_load=settings.dotenv_load)
    return AppState(settings=settings, taskfile=taskfile, registry=registry, env=env)


def create_dispatcher(
    state: AppState,
    *,
    launcher: ProcessLauncher | None = None,
    emit: CommandEmitter | None = None,
) -> Dispatcher:
    return Dispatcher(
        state.registry,
        launcher or SubprocessLauncher(),
        cwd=state.taskfile.directory,
        env=state.env,
        emit=emit,
    )
