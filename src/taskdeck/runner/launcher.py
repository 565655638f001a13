# src/taskdeck/runner/launcher.py

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..core.errors import LaunchError

logger = logging.getLogger(__name__)


class SubprocessLauncher:
    """
    ProcessLauncher backed by subprocess.Popen.

    - no shell: argv is passed to the OS as-is
    - the child inherits stdin/stdout/stderr
    - if the wait is interrupted (Ctrl+C, SystemExit from a host), the child is
      terminated before the exception propagates, so nothing is left orphaned
    """

    def __init__(self, *, terminate_timeout: float = 5.0) -> None:
        self._terminate_timeout = max(0.0, float(terminate_timeout))

    def launch(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        if not argv:
            raise LaunchError(argv, OSError("empty command"))

        logger.debug("Launching argv=%r cwd=%s", list(argv), cwd)
        try:
            proc = subprocess.Popen(
                list(argv),
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
            )
        except OSError as e:
            logger.debug("Launch failed argv=%r", list(argv), exc_info=True)
            raise LaunchError(argv, e) from e

        try:
            returncode = proc.wait()
        except BaseException:
            self._stop(proc)
            raise

        logger.debug("Child pid=%s exited with %s", proc.pid, returncode)
        return returncode

    def _stop(self, proc: subprocess.Popen) -> None:
        if proc.poll() is not None:
            return
        logger.info("Terminating child pid=%s", proc.pid)
        proc.terminate()
        try:
            proc.wait(timeout=self._terminate_timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Child pid=%s did not exit after terminate; killing.", proc.pid)
            proc.kill()
            proc.wait()
