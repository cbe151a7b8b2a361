"""Local stand-in for the external scheduling engine.

Honours the engine's file contract (input file in, result and summary
artifacts out, optional `input output summary` argv) so the pipeline can be
exercised without the real executable. Tasks run back to back in ascending
priority order, ties kept in input order.

`TASKSCHEDULER_DEMO_ENGINE_MODE` selects a behaviour for integration tests:
`ok` (default), `fail`, `hang`, `no-artifacts`, `garbled`.
"""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path


@dataclass
class _Task:
    name: str
    priority: int
    burst_time: int
    deadline: int
    waiting_time: int = 0
    turnaround_time: int = 0


def _read_input(path: Path) -> list[_Task]:
    tokens = path.read_text(encoding="utf-8").split()
    count = int(tokens[0])
    tasks: list[_Task] = []
    for i in range(count):
        name, priority, burst, deadline = tokens[1 + 4 * i : 5 + 4 * i]
        tasks.append(_Task(name, int(priority), int(burst), int(deadline)))
    return tasks


def _schedule(tasks: list[_Task]) -> list[_Task]:
    ordered = sorted(tasks, key=lambda t: t.priority)
    now = 0
    for t in ordered:
        t.waiting_time = now
        now += t.burst_time
        t.turnaround_time = now
    return ordered


def _averages(tasks: list[_Task]) -> tuple[float, float]:
    if not tasks:
        return 0.0, 0.0
    n = len(tasks)
    return (
        sum(t.waiting_time for t in tasks) / n,
        sum(t.turnaround_time for t in tasks) / n,
    )


def render_result(tasks: list[_Task]) -> str:
    avg_wait, avg_tat = _averages(tasks)
    lines = [
        "{",
        f'  "averageWaitingTime": {avg_wait:.2f},',
        f'  "averageTurnaroundTime": {avg_tat:.2f},',
        '  "executionOrder": [',
    ]
    for i, t in enumerate(tasks):
        sep = "," if i < len(tasks) - 1 else ""
        lines.append(f'    "{t.name}"{sep}')
    lines.append("  ],")
    lines.append('  "taskDetails": [')
    for i, t in enumerate(tasks):
        sep = "," if i < len(tasks) - 1 else ""
        lines.append(
            f'    {{"name": "{t.name}", "priority": {t.priority}, '
            f'"burst_time": {t.burst_time}, "waitingTime": {t.waiting_time}, '
            f'"turnaroundTime": {t.turnaround_time}}}{sep}'
        )
    lines.append("  ]")
    lines.append("}")
    return "\n".join(lines)


def render_summary(tasks: list[_Task]) -> str:
    avg_wait, avg_tat = _averages(tasks)
    lines = ["Scheduling Summary", "=================="]
    for t in tasks:
        lines += [
            f"Task: {t.name}",
            f"Priority: {t.priority}",
            f"Duration: {t.burst_time}",
            f"Waiting Time: {t.waiting_time}",
            f"Turnaround Time: {t.turnaround_time}",
        ]
    lines += [
        f"Average Waiting Time: {avg_wait:.2f}",
        f"Average Turnaround Time: {avg_tat:.2f}",
    ]
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    input_path = Path(args[0] if len(args) > 0 else "input.txt")
    output_path = Path(args[1] if len(args) > 1 else "taskoutput.txt")
    summary_path = Path(args[2] if len(args) > 2 else "task_summary.txt")
    mode = os.getenv("TASKSCHEDULER_DEMO_ENGINE_MODE", "ok")

    print(f"Using files:\nInput: {input_path}\nOutput: {output_path}\nSummary: {summary_path}")

    if mode == "fail":
        print(f"Error: Could not open {input_path}")
        return 3
    if mode == "hang":
        time.sleep(3600)
        return 0

    tasks = _schedule(_read_input(input_path))
    for t in tasks:
        print(f"Executed: {t.name} | Waiting: {t.waiting_time} | Turnaround: {t.turnaround_time}")

    if mode == "no-artifacts":
        return 0
    if mode == "garbled":
        output_path.write_text('{"tasks": []}', encoding="utf-8")
    else:
        output_path.write_text(render_result(tasks), encoding="utf-8")
    summary_path.write_text(render_summary(tasks), encoding="utf-8")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
