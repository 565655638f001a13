# src/taskdeck/core/dispatcher.py

from __future__ import annotations

"""
Dispatcher.

One call = one dispatch:
- resolve the requested name through the registry (aliases are invisible here),
- substitute trailing arguments into the task template,
- launch the command through an injected ProcessLauncher and wait,
- return the child's exit status unchanged.

No retries: tasks have side effects (tests, database sessions) that must not repeat silently.
"""

import logging
import os
import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path

from .models import REST_ARGS, DispatchPhase, EnvVar, Invocation, Task
from .ports import CommandEmitter, PhaseObserver, ProcessLauncher
from .registry import TaskRegistry

logger = logging.getLogger(__name__)

_ORDER = [
    DispatchPhase.PENDING,
    DispatchPhase.RESOLVING,
    DispatchPhase.SUBSTITUTING,
    DispatchPhase.EXECUTING,
    DispatchPhase.COMPLETED,
]


def build_command(
        task: Task,
        trailing_args: Sequence[str],
        env: Mapping[str, str] | None = None,
) -> list[str]:
    """
    Assemble the final argv for `task`.

    Literal tokens are emitted verbatim. EnvVar tokens become one argument holding the
    variable's value (empty if unset; `env` defaults to os.environ). The {{args}}
    placeholder is replaced by every trailing argument, each passed as-is. Without a
    placeholder, trailing arguments are appended after the last token.
    """
    if env is None:
        env = os.environ
    argv: list[str] = []
    for tok in task.template:
        if tok is REST_ARGS:
            argv.extend(trailing_args)
        elif isinstance(tok, EnvVar):
            value = env.get(tok.name)
            if value is None:
                logger.warning("Task %s: environment variable %s is not set.", task.name, tok.name)
                value = ""
            argv.append(value)
        else:
            argv.append(tok)

    if not task.has_rest_args:
        argv.extend(trailing_args)
    return argv


class _DispatchRun:
    """Forward-only phase tracker for a single dispatch call."""

    __slots__ = ("invocation", "phase", "_observer")

    def __init__(self, invocation: Invocation, observer: PhaseObserver | None) -> None:
        self.invocation = invocation
        self.phase = DispatchPhase.PENDING
        self._observer = observer
        self._notify()

    def advance(self, phase: DispatchPhase) -> None:
        if self.phase.is_terminal:
            raise RuntimeError(f"dispatch already finished ({self.phase})")
        if phase is not DispatchPhase.FAILED and _ORDER.index(phase) <= _ORDER.index(self.phase):
            raise RuntimeError(f"illegal dispatch transition {self.phase} -> {phase}")
        logger.debug("dispatch %s: %s -> %s", self.invocation.name, self.phase, phase)
        self.phase = phase
        self._notify()

    def _notify(self) -> None:
        if self._observer is not None:
            self._observer(self.phase)


class Dispatcher:
    """
    Runs tasks from a (sealed) TaskRegistry.

    The dispatcher keeps no per-call state; it can be shared by threads as long as
    each call runs in its own thread.
    """

    def __init__(
            self,
            registry: TaskRegistry,
            launcher: ProcessLauncher,
            *,
            cwd: Path | None = None,
            env: Mapping[str, str] | None = None,
            emit: CommandEmitter | None = None,
            observer: PhaseObserver | None = None,
    ) -> None:
        self._registry = registry
        self._launcher = launcher
        self._cwd = cwd
        self._env = env
        self._emit = emit
        self._observer = observer

    def plan(self, name: str, trailing_args: Sequence[str] = ()) -> list[str]:
        """Resolve and substitute without launching anything."""
        task = self._registry.resolve(name)
        return build_command(task, trailing_args, self._env)

    def dispatch(self, name: str, trailing_args: Sequence[str] = ()) -> int:
        run = _DispatchRun(Invocation(name, tuple(trailing_args)), self._observer)
        try:
            run.advance(DispatchPhase.RESOLVING)
            task = self._registry.resolve(name)

            run.advance(DispatchPhase.SUBSTITUTING)
            argv = build_command(task, run.invocation.trailing_args, self._env)

            run.advance(DispatchPhase.EXECUTING)
            if self._emit is not None:
                self._emit(shlex.join(argv))
            status = self._launcher.launch(argv, cwd=self._cwd, env=self._env)
        except BaseException:
            run.advance(DispatchPhase.FAILED)
            raise

        run.advance(DispatchPhase.COMPLETED)
        logger.info("Task %s (%s) exited with status %s", task.name, name, status)
        return status
