# src/taskdeck/core/errors.py

"""
Error taxonomy.

Registration-time errors (DuplicateNameError, UnknownTaskError, TemplateError,
TaskfileError) abort start-up. Dispatch-time errors (UnknownNameError, LaunchError)
are reported to the caller and no fallback execution is attempted.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class TaskdeckError(Exception):
    """Base class for every error raised by taskdeck."""


class DuplicateNameError(TaskdeckError):
    def __init__(self, name: str) -> None:
        super().__init__(f"name {name!r} is already registered")
        self.name = name


class UnknownTaskError(TaskdeckError):
    def __init__(self, alias: str, target: str) -> None:
        super().__init__(f"alias {alias!r} points to unknown task {target!r}")
        self.alias = alias
        self.target = target


class RegistrySealedError(TaskdeckError):
    def __init__(self, name: str) -> None:
        super().__init__(f"cannot register {name!r}: registry is sealed")
        self.name = name


class TemplateError(TaskdeckError, ValueError):
    def __init__(self, task_name: str, reason: str) -> None:
        super().__init__(f"invalid command template for task {task_name!r}: {reason}")
        self.task_name = task_name
        self.reason = reason


class TaskfileError(TaskdeckError):
    def __init__(self, path: str | Path | None, reason: str) -> None:
        where = str(path) if path is not None else "<taskfile>"
        super().__init__(f"{where}: {reason}")
        self.path = Path(path) if path is not None else None
        self.reason = reason


class UnknownNameError(TaskdeckError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown task or alias: {name!r}")
        self.name = name


class LaunchError(TaskdeckError):
    """The command could not be started. Wraps the underlying OSError."""

    def __init__(self, argv: Sequence[str], error: OSError) -> None:
        program = argv[0] if argv else "<empty>"
        super().__init__(f"failed to start {program!r}: {error.strerror or error}")
        self.argv = list(argv)
        self.error = error
