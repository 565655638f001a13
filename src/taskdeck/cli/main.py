# src/taskdeck/cli/main.py

"""
CLI entrypoint.

    taskdeck [options] [NAME [ARGS...]]

Options are only recognized before NAME. Everything after NAME is forwarded to the
task verbatim, including things that look like options (`taskdeck test --nocapture`).
Without NAME the task list is printed.
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path

from ..config import get_settings
from ..core.errors import TaskdeckError
from ..logging_setup import level_from_name, setup_logging
from .bootstrap import create_dispatcher, create_initial_state
from .listing import build_listing

logger = logging.getLogger(__name__)

# Reserved for failures of taskdeck itself (unknown name, launch failure, bad taskfile).
EXIT_DISPATCH_FAILURE = 127
EXIT_INTERRUPTED = 130

_LONG_VALUE_OPTIONS = frozenset({"--taskfile", "--log-level"})
_SHORT_FLAGS = frozenset("lnh")
_SHORT_VALUE_FLAGS = frozenset("f")


def _takes_next_token(tok: str) -> bool:
    """Whether option token `tok` consumes the following argv entry as its value."""
    if tok.startswith("--"):
        return tok in _LONG_VALUE_OPTIONS
    # Short cluster, read like argparse: "-nf X" -> f takes X, "-fX" -> f takes "X".
    for pos, ch in enumerate(tok[1:], start=1):
        if ch in _SHORT_VALUE_FLAGS:
            return pos == len(tok) - 1
        if ch not in _SHORT_FLAGS:
            return False
    return False


def split_argv(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """
    Split argv into (taskdeck options, [NAME, *ARGS]).

    The first token that is not an option (or option value) starts the invocation.
    A bare "--" ends option parsing explicitly. Long options must be spelled out in
    full; grouped short flags ("-nf FILE") are supported.
    """
    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok == "--":
            return list(argv[:i]), list(argv[i + 1:])
        if tok == "-" or not tok.startswith("-"):
            return list(argv[:i]), list(argv[i:])
        i += 2 if _takes_next_token(tok) else 1
    return list(argv), []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskdeck",
        allow_abbrev=False,
        usage="%(prog)s [options] [NAME [ARGS...]]",
        description="Run named tasks from a taskdeck.toml. Arguments after NAME are passed through.",
    )
    parser.add_argument("-f", "--taskfile", type=Path, help="path to the taskfile (default: search upward)")
    parser.add_argument("-l", "--list", action="store_true", help="list tasks and aliases, then exit")
    parser.add_argument("-n", "--dry-run", action="store_true", help="print the command instead of running it")
    parser.add_argument("--log-level", help="console log level (default: TASKDECK_LOG_LEVEL or WARNING)")
    return parser


def exit_code_for(status: int) -> int:
    """Map a child status to a process exit code (killed by signal N -> 128 + N)."""
    if status < 0:
        return 128 + (-status)
    return status


def _report(message: str) -> None:
    print(f"taskdeck: error: {message}", file=sys.stderr, flush=True)


def _echo(command_line: str) -> None:
    print(command_line, file=sys.stderr, flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()

    head, invocation = split_argv(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(head)

    console_level = level_from_name(args.log_level or settings.log_level)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    try:
        state = create_initial_state(settings, taskfile_path=args.taskfile)
    except TaskdeckError as e:
        # Do NOT duplicate the user-facing message in WARNING logs (both go to stderr).
        logger.debug("Start-up failed.", exc_info=True)
        _report(str(e))
        return EXIT_DISPATCH_FAILURE

    if args.list or not invocation:
        print(build_listing(state.registry))
        return 0

    name, trailing_args = invocation[0], invocation[1:]
    emit = _echo if settings.echo and not args.dry_run else None
    dispatcher = create_dispatcher(state, emit=emit)

    try:
        if args.dry_run:
            print(shlex.join(dispatcher.plan(name, trailing_args)))
            return 0
        status = dispatcher.dispatch(name, trailing_args)
    except TaskdeckError as e:
        logger.debug("Dispatch of %r failed.", name, exc_info=True)
        _report(str(e))
        return EXIT_DISPATCH_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted while running %s.", name)
        return EXIT_INTERRUPTED

    return exit_code_for(status)


if __name__ == "__main__":
    raise SystemExit(main())
