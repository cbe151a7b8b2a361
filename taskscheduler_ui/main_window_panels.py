from __future__ import annotations

from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QTableWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from taskscheduler_ui.outputs_view import OutputsView
from taskscheduler_ui.task_table import TaskTableEditor
from taskscheduler_ui.timeline_widget import TimelineWidget


def build_left_panel(window) -> QWidget:
    root = QWidget()
    layout = QVBoxLayout(root)
    layout.setContentsMargins(10, 10, 10, 10)

    tasks_box = QGroupBox("Tasks")
    tasks_layout = QVBoxLayout(tasks_box)
    window._task_table = TaskTableEditor(tasks_box)
    tasks_layout.addWidget(window._task_table)

    engine_box = QGroupBox("Engine")
    engine_form = QFormLayout(engine_box)
    engine_form.setFieldGrowthPolicy(QFormLayout.FieldGrowthPolicy.AllNonFixedFieldsGrow)

    window._engine_label = QLabel(" ".join(window._context.engine_command))
    window._engine_label.setWordWrap(True)
    engine_form.addRow("Command", window._engine_label)

    window._workdir_label = QLabel(str(window._context.workdir))
    window._workdir_label.setWordWrap(True)
    engine_form.addRow("Working directory", window._workdir_label)

    btn_row = QWidget()
    btn_row_layout = QHBoxLayout(btn_row)
    btn_row_layout.setContentsMargins(0, 0, 0, 0)

    window._run_btn = QPushButton("Run Scheduler")
    window._run_btn.clicked.connect(window._on_run_clicked)
    btn_row_layout.addWidget(window._run_btn)

    window._cancel_btn = QPushButton("Cancel")
    window._cancel_btn.setToolTip("Stop the engine and discard this run.")
    window._cancel_btn.clicked.connect(window._on_cancel_clicked)
    btn_row_layout.addWidget(window._cancel_btn)
    engine_form.addRow("", btn_row)

    layout.addWidget(tasks_box, 1)
    layout.addWidget(engine_box)
    return root


def build_results_panel(window) -> QWidget:
    root = QWidget()
    layout = QVBoxLayout(root)
    layout.setContentsMargins(10, 10, 10, 10)

    tabs = QTabWidget(root)

    window._results_table = QTableWidget(0, 0)
    window._results_table.verticalHeader().setVisible(False)
    tabs.addTab(window._results_table, "Results Table")

    window._timeline = TimelineWidget()
    tabs.addTab(window._timeline, "Gantt Chart")

    summary_page = QWidget()
    summary_layout = QVBoxLayout(summary_page)
    window._averages_label = QLabel("")
    summary_layout.addWidget(window._averages_label)
    window._summary_text = QPlainTextEdit()
    window._summary_text.setReadOnly(True)
    window._summary_text.setPlaceholderText("Run the scheduler to see its summary.")
    summary_layout.addWidget(window._summary_text, 1)
    tabs.addTab(summary_page, "Summary")

    window._results_tabs = tabs
    window._outputs_view = OutputsView(
        results_table=window._results_table,
        timeline=window._timeline,
        summary_text=window._summary_text,
        averages_label=window._averages_label,
    )

    layout.addWidget(tabs, 1)
    return root
