# src/taskdeck/taskfile.py

"""
Taskfile loader.

A taskfile is TOML:

    [tasks.run]
    description = "Run the service"
    command = ["cargo", "run", "--locked", "{{args}}"]

    [tasks]
    psql = 'psql "$DATABASE_URL" {{args}}'

    [aliases]
    r = "run"

String commands are split with shlex (POSIX rules); array commands are taken token by token.
Tasks are registered in document order, then aliases.
"""

from __future__ import annotations

import logging
import re
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .core.errors import TaskfileError, TemplateError
from .core.models import Alias, Task
from .core.registry import TaskRegistry

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_-]*$")
_TOP_LEVEL_KEYS = {"tasks", "aliases"}
_TASK_KEYS = {"command", "description"}


@dataclass(slots=True)
class Taskfile:
    path: Path | None
    tasks: list[Task] = field(default_factory=list)
    aliases: list[Alias] = field(default_factory=list)

    @property
    def directory(self) -> Path | None:
        return self.path.parent if self.path is not None else None


def find_taskfile(start: str | Path, name: str) -> Path | None:
    """Look for `name` in `start` and each of its parents; first hit wins."""
    start = Path(start).resolve()
    for directory in (start, *start.parents):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_taskfile(path: str | Path) -> Taskfile:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise TaskfileError(path, "file not found") from None
    except OSError as e:
        raise TaskfileError(path, f"cannot read file: {e.strerror or e}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise TaskfileError(path, f"not valid UTF-8: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise TaskfileError(path, f"invalid TOML: {e}") from e

    taskfile = parse_taskfile(data, path=path)
    logger.info(
        "Loaded taskfile %s: %d tasks, %d aliases",
        path,
        len(taskfile.tasks),
        len(taskfile.aliases),
    )
    return taskfile


def parse_taskfile(data: dict[str, Any], *, path: Path | None = None) -> Taskfile:
    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise TaskfileError(path, f"unknown top-level keys: {', '.join(sorted(unknown))}")

    tasks_raw = data.get("tasks", {})
    aliases_raw = data.get("aliases", {})
    if not isinstance(tasks_raw, dict):
        raise TaskfileError(path, "'tasks' must be a table")
    if not isinstance(aliases_raw, dict):
        raise TaskfileError(path, "'aliases' must be a table")

    out = Taskfile(path=path)
    for name, definition in tasks_raw.items():
        _check_name(name, path)
        out.tasks.append(_parse_task(name, definition, path))

    for name, target in aliases_raw.items():
        _check_name(name, path)
        if not isinstance(target, str) or not target.strip():
            raise TaskfileError(path, f"alias {name!r} must map to a task name")
        out.aliases.append(Alias(name=name, target=target.strip()))

    return out


def build_registry(taskfile: Taskfile) -> TaskRegistry:
    """Register every task, then every alias, then seal. Registry errors propagate as-is."""
    registry = TaskRegistry()
    for task in taskfile.tasks:
        registry.register(task)
    for alias in taskfile.aliases:
        registry.register_alias(alias)
    registry.seal()
    return registry


def _check_name(name: str, path: Path | None) -> None:
    if not _NAME_RE.match(name):
        raise TaskfileError(path, f"invalid name {name!r}")


def _parse_task(name: str, definition: Any, path: Path | None) -> Task:
    description: str | None = None
    command: Any = definition

    if isinstance(definition, dict):
        unknown = set(definition) - _TASK_KEYS
        if unknown:
            raise TaskfileError(path, f"task {name!r}: unknown keys: {', '.join(sorted(unknown))}")
        if "command" not in definition:
            raise TaskfileError(path, f"task {name!r}: missing 'command'")
        command = definition["command"]
        desc_any = definition.get("description")
        if desc_any is not None and not isinstance(desc_any, str):
            raise TaskfileError(path, f"task {name!r}: 'description' must be a string")
        description = desc_any.strip() if desc_any else None

    tokens = _command_tokens(name, command, path)
    try:
        return Task.from_tokens(name, tokens, description=description)
    except TemplateError as e:
        raise TaskfileError(path, str(e)) from e


def _command_tokens(name: str, command: Any, path: Path | None) -> list[str]:
    if isinstance(command, str):
        try:
            return shlex.split(command)
        except ValueError as e:
            raise TaskfileError(path, f"task {name!r}: cannot split command: {e}") from e

    if isinstance(command, list):
        if not all(isinstance(tok, str) for tok in command):
            raise TaskfileError(path, f"task {name!r}: command array must contain only strings")
        return list(command)

    raise TaskfileError(path, f"task {name!r}: command must be a string or an array of strings")
