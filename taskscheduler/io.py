from __future__ import annotations

import csv
import json
import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from taskscheduler.errors import TaskValidationError
from taskscheduler.model import TaskSpec
from taskscheduler.types import RunSucceeded, ScheduleEntry


def load_tasks_json(path: Path) -> list[TaskSpec]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("tasks", [])
    if not isinstance(raw, list):
        raise TaskValidationError(f"{path}: expected a list of task objects")
    return [TaskSpec.from_json(obj) for obj in raw]


def save_tasks_json(path: Path, tasks: Sequence[TaskSpec]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps([t.to_json() for t in tasks], indent=2),
        encoding="utf-8",
    )


def write_schedule_csv(path: Path, schedule: Sequence[ScheduleEntry]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "position",
                "name",
                "priority",
                "duration",
                "waiting_time",
                "turnaround_time",
            ]
        )
        for position, e in enumerate(schedule, start=1):
            w.writerow(
                [
                    position,
                    e.name,
                    e.priority,
                    e.duration,
                    e.waiting_time,
                    e.turnaround_time,
                ]
            )


def _json_number(value: float) -> float | None:
    return None if math.isnan(value) else value


def summary_to_json(outcome: RunSucceeded) -> dict[str, Any]:
    s = outcome.summary
    return {
        "execution_order": [e.name for e in outcome.schedule],
        "average_waiting_time": _json_number(s.average_waiting_time),
        "average_turnaround_time": _json_number(s.average_turnaround_time),
        "summary_tasks": [
            {
                "name": t.name,
                "priority": t.priority,
                "duration": t.duration,
                "waiting_time": t.waiting_time,
                "turnaround_time": t.turnaround_time,
            }
            for t in s.tasks
        ],
        "timeline": [
            {"name": t.name, "start": t.start, "end": t.end} for t in outcome.timeline
        ],
    }


def write_summary_json(path: Path, outcome: RunSucceeded) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(summary_to_json(outcome), indent=2, sort_keys=True),
        encoding="utf-8",
    )
