from __future__ import annotations

from collections.abc import Sequence

from taskscheduler.errors import TaskValidationError
from taskscheduler.model import TaskSpec


def validate_tasks(tasks: Sequence[TaskSpec]) -> None:
    if not tasks:
        raise TaskValidationError("No tasks provided")

    seen: set[str] = set()
    for task in tasks:
        if not task.name:
            raise TaskValidationError("task name must not be empty")
        # The engine input is space separated with no quoting.
        if any(ch.isspace() for ch in task.name):
            raise TaskValidationError(
                f"task name {task.name!r} must not contain whitespace"
            )
        if task.name in seen:
            raise TaskValidationError(f"duplicate task name '{task.name}'")
        seen.add(task.name)

        if task.duration < 0:
            raise TaskValidationError(
                f"task '{task.name}' duration must be >= 0 (got {task.duration})"
            )
