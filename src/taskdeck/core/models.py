# src/taskdeck/core/models.py

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .errors import TemplateError

REST_ARGS_MARKER: Final = "{{args}}"

_ENV_TOKEN_RE = re.compile(r"^\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))$")


class RestArgs:
    """Placeholder that absorbs every trailing argument of an invocation."""

    __slots__ = ()
    _instance: RestArgs | None = None

    def __new__(cls) -> RestArgs:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "REST_ARGS"


REST_ARGS: Final = RestArgs()


@dataclass(frozen=True, slots=True)
class EnvVar:
    """Whole-token reference to a variable of the child environment."""

    name: str

    def __str__(self) -> str:
        return f"${{{self.name}}}"


Token = str | EnvVar | RestArgs


def parse_token(raw: str) -> Token:
    """
    Turn one taskfile token into a template token.

    "{{args}}" -> REST_ARGS
    "$NAME" / "${NAME}" -> EnvVar("NAME")
    anything else -> literal string (kept verbatim, even if it contains "$")
    """
    if raw == REST_ARGS_MARKER:
        return REST_ARGS
    m = _ENV_TOKEN_RE.match(raw)
    if m:
        return EnvVar(m.group("braced") or m.group("bare"))
    return raw


@dataclass(frozen=True, slots=True)
class Task:
    name: str
    template: tuple[Token, ...]
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.template:
            raise TemplateError(self.name, "template is empty")
        for tok in self.template:
            if not isinstance(tok, (str, EnvVar, RestArgs)):
                raise TemplateError(self.name, f"unsupported token {tok!r}")
        if self.template[0] is REST_ARGS:
            raise TemplateError(self.name, "template must start with a program, not {{args}}")
        rest_positions = [i for i, tok in enumerate(self.template) if tok is REST_ARGS]
        if len(rest_positions) > 1:
            raise TemplateError(self.name, "at most one {{args}} placeholder is allowed")
        if rest_positions and rest_positions[0] != len(self.template) - 1:
            raise TemplateError(self.name, "{{args}} must be the last token")

    @property
    def has_rest_args(self) -> bool:
        return self.template[-1] is REST_ARGS

    @classmethod
    def from_tokens(cls, name: str, tokens: list[str], description: str | None = None) -> Task:
        return cls(name=name, template=tuple(parse_token(t) for t in tokens), description=description)


@dataclass(frozen=True, slots=True)
class Alias:
    name: str
    target: str


@dataclass(frozen=True, slots=True)
class Invocation:
    name: str
    trailing_args: tuple[str, ...] = ()


class DispatchPhase(StrEnum):
    """
    Per-dispatch lifecycle.

    PENDING -> RESOLVING -> SUBSTITUTING -> EXECUTING -> COMPLETED
    Any phase before COMPLETED may end in FAILED. Phases never go backwards.
    """

    PENDING = "pending"
    RESOLVING = "resolving"
    SUBSTITUTING = "substituting"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DispatchPhase.COMPLETED, DispatchPhase.FAILED)
