from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from taskscheduler.errors import TaskValidationError


@dataclass(frozen=True)
class TaskSpec:
    name: str
    priority: int
    duration: int
    deadline: int = 0

    @staticmethod
    def from_json(obj: dict[str, Any]) -> "TaskSpec":
        if not isinstance(obj, dict):
            raise TaskValidationError(f"task entry must be an object: {obj!r}")
        if "name" not in obj:
            raise TaskValidationError(f"task object has no 'name': {obj!r}")
        name = str(obj["name"]).strip()
        return TaskSpec(
            name=name,
            priority=_parse_int(obj.get("priority"), field="priority", task=name),
            duration=_parse_int(obj.get("duration"), field="duration", task=name),
            deadline=_parse_int(obj.get("deadline", 0) or 0, field="deadline", task=name),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "priority": self.priority,
            "duration": self.duration,
            "deadline": self.deadline,
        }


def _parse_int(value: Any, *, field: str, task: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise TaskValidationError(f"task '{task}' is missing '{field}'")
    if isinstance(value, bool):
        raise TaskValidationError(f"task '{task}' {field} must be an integer (got {value!r})")
    try:
        return int(str(value).strip())
    except ValueError:
        raise TaskValidationError(
            f"task '{task}' {field} must be an integer (got {value!r})"
        ) from None


def parse_task_rows(rows: Iterable[Sequence[str]]) -> list[TaskSpec]:
    """Convert raw table rows `(name, priority, duration, deadline)` to specs.

    Rows with every cell blank are skipped. A blank deadline means 0; any other
    blank cell is an error naming the 1-based row.
    """

    tasks: list[TaskSpec] = []
    for idx, row in enumerate(rows, start=1):
        cells = [str(c).strip() if c is not None else "" for c in row]
        cells += [""] * (4 - len(cells))
        name, priority, duration, deadline = cells[:4]
        if not any(cells[:4]):
            continue
        if not name:
            raise TaskValidationError(f"row {idx}: task name is empty")
        try:
            tasks.append(
                TaskSpec(
                    name=name,
                    priority=_parse_int(priority, field="priority", task=name),
                    duration=_parse_int(duration, field="duration", task=name),
                    deadline=_parse_int(deadline or "0", field="deadline", task=name),
                )
            )
        except TaskValidationError as e:
            raise TaskValidationError(f"row {idx}: {e}") from None
    return tasks
