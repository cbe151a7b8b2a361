from __future__ import annotations

from collections.abc import Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from taskscheduler.model import TaskSpec, parse_task_rows

TASK_COLUMNS = ("Task Name", "Priority", "Duration", "Deadline")


class TaskTableEditor(QWidget):
    """Editable task list: one row per task, cells edited in place."""

    changed = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.table = QTableWidget(0, len(TASK_COLUMNS), self)
        self.table.setHorizontalHeaderLabels(list(TASK_COLUMNS))
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.itemChanged.connect(lambda _item: self.changed.emit())
        layout.addWidget(self.table, 1)

        btn_row = QWidget(self)
        btns = QHBoxLayout(btn_row)
        btns.setContentsMargins(0, 0, 0, 0)
        self.add_btn = QPushButton("Add Task", btn_row)
        self.add_btn.clicked.connect(self.add_row)
        btns.addWidget(self.add_btn)
        self.delete_btn = QPushButton("Delete Task", btn_row)
        self.delete_btn.clicked.connect(self.delete_selected)
        btns.addWidget(self.delete_btn)
        btns.addStretch(1)
        layout.addWidget(btn_row)

    def add_row(self, values: Sequence[str] | None = None) -> None:
        # `clicked` passes a bool.
        if not isinstance(values, (list, tuple)):
            values = ("", "", "", "")
        row = self.table.rowCount()
        self.table.blockSignals(True)
        self.table.insertRow(row)
        for col in range(len(TASK_COLUMNS)):
            text = str(values[col]) if col < len(values) else ""
            self.table.setItem(row, col, QTableWidgetItem(text))
        self.table.blockSignals(False)
        self.changed.emit()

    def delete_selected(self) -> None:
        row = self.table.currentRow()
        if row < 0:
            return
        self.table.removeRow(row)
        self.changed.emit()

    def rows(self) -> list[tuple[str, str, str, str]]:
        out: list[tuple[str, str, str, str]] = []
        for r in range(self.table.rowCount()):
            cells = []
            for c in range(len(TASK_COLUMNS)):
                item = self.table.item(r, c)
                cells.append(item.text() if item is not None else "")
            out.append((cells[0], cells[1], cells[2], cells[3]))
        return out

    def task_specs(self) -> list[TaskSpec]:
        """Parse the table; raises `TaskValidationError` naming the bad row."""

        return parse_task_rows(self.rows())

    def set_tasks(self, tasks: Sequence[TaskSpec]) -> None:
        self.table.setRowCount(0)
        for t in tasks:
            self.add_row((t.name, str(t.priority), str(t.duration), str(t.deadline)))

    def set_editable(self, editable: bool) -> None:
        self.table.setEnabled(editable)
        self.add_btn.setEnabled(editable)
        self.delete_btn.setEnabled(editable)
