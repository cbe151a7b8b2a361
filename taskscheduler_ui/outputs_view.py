from __future__ import annotations

import math

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPlainTextEdit, QTableWidget, QTableWidgetItem

from taskscheduler.types import RunSucceeded
from taskscheduler_ui.timeline_widget import TimelineWidget

RESULT_COLUMNS = ("Task", "Priority", "Duration", "Waiting Time", "Turnaround Time")


class OutputsView:
    """Binds a successful run to the results, timeline and summary widgets."""

    def __init__(
        self,
        *,
        results_table: QTableWidget,
        timeline: TimelineWidget,
        summary_text: QPlainTextEdit,
        averages_label: QLabel,
    ) -> None:
        self._results_table = results_table
        self._timeline = timeline
        self._summary_text = summary_text
        self._averages_label = averages_label

        self._results_table.setColumnCount(len(RESULT_COLUMNS))
        self._results_table.setHorizontalHeaderLabels(list(RESULT_COLUMNS))

    def render(self, outcome: RunSucceeded) -> None:
        table = self._results_table
        table.setRowCount(len(outcome.schedule))
        for row, e in enumerate(outcome.schedule):
            cells = (e.name, e.priority, e.duration, e.waiting_time, e.turnaround_time)
            for col, value in enumerate(cells):
                item = QTableWidgetItem(value)
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                table.setItem(row, col, item)

        self._timeline.set_entries(outcome.timeline)
        self._averages_label.setText(format_averages(outcome))
        self._summary_text.setPlainText(format_summary_text(outcome))

    def clear(self) -> None:
        self._results_table.setRowCount(0)
        self._timeline.set_entries([])
        self._averages_label.setText("")
        self._summary_text.setPlainText("")


def _fmt_avg(value: float) -> str:
    return "-" if math.isnan(value) else f"{value:.2f}"


def format_averages(outcome: RunSucceeded) -> str:
    s = outcome.summary
    return (
        f"Average Waiting Time: {_fmt_avg(s.average_waiting_time)}    "
        f"Average Turnaround Time: {_fmt_avg(s.average_turnaround_time)}"
    )


def format_summary_text(outcome: RunSucceeded) -> str:
    """Format the summary tab as plain text.

    Kept Qt-free so it can also be reused by export code. The engine's own
    summary report follows verbatim; it is not cross-checked against the
    decoded schedule.
    """

    s = outcome.summary
    lines: list[str] = [
        f"Tasks scheduled: {len(outcome.schedule)}",
        f"Execution order: {' -> '.join(e.name for e in outcome.schedule) or '(none)'}",
        f"Average waiting time: {_fmt_avg(s.average_waiting_time)}",
        f"Average turnaround time: {_fmt_avg(s.average_turnaround_time)}",
    ]

    if s.tasks:
        lines.append("")
        lines.append("Summary report tasks:")
        for t in s.tasks:
            lines.append(
                f"- {t.name}: priority={t.priority} duration={t.duration} "
                f"waiting={t.waiting_time} turnaround={t.turnaround_time}"
            )

    raw = outcome.summary_text.strip()
    if raw:
        lines.append("")
        lines.append("Engine summary:")
        lines.append(raw)

    return "\n".join(lines)
