from __future__ import annotations

import time
from pathlib import Path

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QSplitter,
    QStatusBar,
)

from taskscheduler.config import RunContext
from taskscheduler.errors import TaskValidationError
from taskscheduler.types import RunSucceeded

from taskscheduler_ui.main_window_file_io import (
    export_schedule_dialog as _export_schedule_dialog,
    load_tasks as _load_tasks,
    open_tasks_dialog as _open_tasks_dialog,
    save_tasks_dialog as _save_tasks_dialog,
)
from taskscheduler_ui.main_window_menus import build_menus
from taskscheduler_ui.main_window_panels import build_left_panel, build_results_panel
from taskscheduler_ui.run_controller import RunController, RunRequest

_FAILURE_TITLES = {
    "validation": "Invalid tasks",
    "serialization": "File error",
    "invocation": "Execution error",
    "timeout": "Scheduler timed out",
    "decode": "Could not read results",
    "busy": "Run already active",
}


class MainWindow(QMainWindow):
    def __init__(self, *, run_controller: RunController, context: RunContext) -> None:
        super().__init__()
        self._controller = run_controller
        self._context = context

        self._active_run_token: int | None = None
        self._active_cancelled = False

        # Last successful, non-cancelled outcome. Used by the export action.
        self._last_outcome: RunSucceeded | None = None

        self._elapsed_timer = QTimer(self)
        self._elapsed_timer.setInterval(200)
        self._elapsed_timer.timeout.connect(self._update_elapsed)
        self._elapsed_started_at: float | None = None

        self._build_actions()
        self._build_ui()
        self._wire_controller()

        self.setWindowTitle("Task Scheduler App")
        self._set_running(False)

    def _build_actions(self) -> None:
        build_menus(
            self,
            on_open_tasks=self._open_tasks_dialog,
            on_save_tasks=self._save_tasks_dialog,
            on_export_schedule=self._export_schedule_dialog,
            on_exit=self.close,
        )

    def _build_ui(self) -> None:
        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(build_left_panel(self))
        splitter.addWidget(build_results_panel(self))
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 2)
        self.setCentralWidget(splitter)

        status = QStatusBar()
        self.setStatusBar(status)
        self._busy_bar = QProgressBar()
        self._busy_bar.setFixedWidth(160)
        self._busy_bar.setTextVisible(False)
        self._busy_bar.setRange(0, 0)
        status.addPermanentWidget(self._busy_bar)

        self._status_label = QLabel("Ready")
        status.addWidget(self._status_label, 1)

        self._elapsed_label = QLabel("")
        status.addPermanentWidget(self._elapsed_label)

    def _wire_controller(self) -> None:
        self._controller.started.connect(self._on_run_started)
        self._controller.succeeded.connect(self._on_run_succeeded)
        self._controller.failed.connect(self._on_run_failed)
        self._controller.finished.connect(self._on_run_finished)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        # Cancel and wait for an active run to avoid:
        #   QThread: Destroyed while thread '' is still running
        self._controller.shutdown()
        super().closeEvent(event)

    def _open_tasks_dialog(self) -> None:
        _open_tasks_dialog(self)

    def _save_tasks_dialog(self) -> None:
        _save_tasks_dialog(self)

    def _export_schedule_dialog(self) -> None:
        _export_schedule_dialog(self)

    def _load_tasks(self, path: Path) -> None:
        _load_tasks(self, path)

    def _on_run_clicked(self) -> None:
        if self._controller.is_running():
            return
        try:
            tasks = self._task_table.task_specs()
        except TaskValidationError as e:
            QMessageBox.warning(self, "Invalid task", str(e))
            return

        req = RunRequest(tasks=tuple(tasks), context=self._context)
        self._active_cancelled = False
        self._active_run_token = self._controller.start(req)

    def _on_cancel_clicked(self) -> None:
        if not self._controller.is_running():
            return
        self._active_cancelled = True
        self._controller.cancel_active()
        self._status_label.setText("Cancelling…")

    def _on_run_started(self, run_token: int) -> None:
        self._active_run_token = run_token
        self._set_running(True)
        self._status_label.setText("Running scheduler…")
        self._elapsed_started_at = time.monotonic()
        self._elapsed_label.setText("0.0s")
        self._elapsed_timer.start()

    def _on_run_succeeded(self, run_token: int, outcome_obj: object) -> None:
        if self._active_cancelled:
            return
        if isinstance(outcome_obj, RunSucceeded):
            self._last_outcome = outcome_obj
            self._outputs_view.render(outcome_obj)
        self._status_label.setText("Completed")

    def _on_run_failed(self, run_token: int, kind: str, error_text: str) -> None:
        if self._active_cancelled or kind == "cancelled":
            self._status_label.setText("Cancelled")
            return
        self._status_label.setText("Failed")
        title = _FAILURE_TITLES.get(kind, "Scheduler failed")
        QMessageBox.critical(self, title, error_text)

    def _on_run_finished(self, run_token: int, elapsed_seconds: float) -> None:
        self._elapsed_timer.stop()
        self._elapsed_label.setText(f"{elapsed_seconds:0.2f}s")
        self._elapsed_started_at = None
        self._active_run_token = None
        self._set_running(False)

    def _set_running(self, running: bool) -> None:
        self._busy_bar.setVisible(running)
        self._run_btn.setEnabled(not running)
        self._cancel_btn.setEnabled(running)
        self._task_table.set_editable(not running)
        self._export_action.setEnabled((self._last_outcome is not None) and not running)

    def _update_elapsed(self) -> None:
        if not self._controller.is_running() or self._elapsed_started_at is None:
            return
        elapsed = max(0.0, time.monotonic() - self._elapsed_started_at)
        self._elapsed_label.setText(f"{elapsed:0.1f}s")
