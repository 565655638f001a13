# tests/test_models.py

from __future__ import annotations

import pytest

from taskdeck.core.errors import TemplateError
from taskdeck.core.models import REST_ARGS, EnvVar, RestArgs, Task, parse_token


def test_parse_token_kinds() -> None:
    assert parse_token("{{args}}") is REST_ARGS
    assert parse_token("$DATABASE_URL") == EnvVar("DATABASE_URL")
    assert parse_token("${HOME}") == EnvVar("HOME")
    assert parse_token("--locked") == "--locked"
    # only whole tokens are references
    assert parse_token("postgres://$USER@db") == "postgres://$USER@db"
    assert parse_token("$") == "$"


def test_rest_args_is_a_singleton() -> None:
    assert RestArgs() is REST_ARGS


def test_rest_args_must_be_last() -> None:
    with pytest.raises(TemplateError):
        Task.from_tokens("bad", ["cargo", "{{args}}", "--locked"])


def test_only_one_rest_args_placeholder() -> None:
    with pytest.raises(TemplateError):
        Task.from_tokens("bad", ["cargo", "{{args}}", "{{args}}"])


@pytest.mark.parametrize("tokens", [[], ["{{args}}"]])
def test_template_needs_a_program(tokens: list[str]) -> None:
    with pytest.raises(TemplateError):
        Task.from_tokens("bad", tokens)


def test_template_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        Task(name="bad", template=())


def test_has_rest_args() -> None:
    assert Task.from_tokens("a", ["psql", "{{args}}"]).has_rest_args
    assert not Task.from_tokens("b", ["make", "all"]).has_rest_args
