# src/taskdeck/core/registry.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import cast

from .errors import DuplicateNameError, RegistrySealedError, UnknownNameError, UnknownTaskError
from .models import Alias, Task

logger = logging.getLogger(__name__)

Entry = Task | Alias


class _Listing:
    """Restartable lazy view over the registry: (display_name, task_name) in insertion order."""

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[str, Entry]) -> None:
        self._entries = entries

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for name, entry in self._entries.items():
            if isinstance(entry, Alias):
                yield name, entry.target
            else:
                yield name, entry.name

    def __len__(self) -> int:
        return len(self._entries)


class TaskRegistry:
    """
    Name -> Task table with aliases.

    Populated once at start-up, then sealed and used read-only.
    Tasks and aliases share one namespace; names are case-sensitive.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        self._sealed = True
        logger.debug("Registry sealed with %d entries.", len(self._entries))

    def register(self, task: Task) -> None:
        self._check_writable(task.name)
        if task.name in self._entries:
            raise DuplicateNameError(task.name)
        self._entries[task.name] = task
        logger.debug("Registered task %s -> %s", task.name, task.template)

    def register_alias(self, alias: Alias) -> None:
        self._check_writable(alias.name)
        if alias.name in self._entries:
            raise DuplicateNameError(alias.name)
        # Aliases never chain: the target must be a task.
        if not isinstance(self._entries.get(alias.target), Task):
            raise UnknownTaskError(alias.name, alias.target)
        self._entries[alias.name] = alias
        logger.debug("Registered alias %s -> %s", alias.name, alias.target)

    def resolve(self, name: str) -> Task:
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownNameError(name)
        if isinstance(entry, Alias):
            # register_alias only accepts Task targets and entries are never removed.
            return cast(Task, self._entries[entry.target])
        return entry

    def list_all(self) -> _Listing:
        return _Listing(self._entries)

    def tasks(self) -> list[Task]:
        return [e for e in self._entries.values() if isinstance(e, Task)]

    def aliases_for(self, task_name: str) -> list[str]:
        return [
            e.name
            for e in self._entries.values()
            if isinstance(e, Alias) and e.target == task_name
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _check_writable(self, name: str) -> None:
        if self._sealed:
            raise RegistrySealedError(name)
