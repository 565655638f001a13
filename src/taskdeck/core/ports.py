# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The dispatcher depends on a Protocol instead of subprocess directly.
This keeps process launching swappable and lets tests run without spawning anything.
"""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Protocol

from .models import DispatchPhase

CommandEmitter = Callable[[str], None]
PhaseObserver = Callable[[DispatchPhase], None]


class ProcessLauncher(Protocol):
    """
    Start a command, wait for it, return its exit status.

    The child inherits stdin/stdout/stderr. Failures to start must raise LaunchError.
    """

    def launch(
            self,
            argv: Sequence[str],
            *,
            cwd: Path | None = None,
            env: Mapping[str, str] | None = None,
    ) -> int: ...
