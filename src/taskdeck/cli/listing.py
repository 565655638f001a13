# src/taskdeck/cli/listing.py

from __future__ import annotations

from ..core.registry import TaskRegistry


def build_listing(registry: TaskRegistry) -> str:
    """
    Human-readable task list, in taskfile order.

        Available tasks:
          run [r]   - Run the service
          psql [p]

    Names starting with "_" are private and not listed (aliases pointing at them neither).
    """
    rows: list[tuple[str, str | None]] = []
    for display_name, task_name in registry.list_all():
        if display_name != task_name or task_name.startswith("_"):
            continue
        aliases = registry.aliases_for(task_name)
        label = f"{task_name} [{', '.join(aliases)}]" if aliases else task_name
        rows.append((label, registry.resolve(task_name).description))

    if not rows:
        return "No tasks defined."

    width = max(len(label) for label, _ in rows)
    lines = ["Available tasks:"]
    for label, description in rows:
        if description:
            lines.append(f"  {label.ljust(width)} - {description}")
        else:
            lines.append(f"  {label}")
    return "\n".join(lines)
