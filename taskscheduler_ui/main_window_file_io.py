from __future__ import annotations

import json
from pathlib import Path

from PySide6.QtWidgets import QFileDialog, QMessageBox

from taskscheduler.errors import TaskValidationError
from taskscheduler.io import load_tasks_json, save_tasks_json, write_schedule_csv


def open_tasks_dialog(window) -> None:
    path_str, _ = QFileDialog.getOpenFileName(
        window,
        "Open task list",
        "",
        "JSON files (*.json);;All files (*)",
    )
    if not path_str:
        return
    # Call the window method (not the helper) so tests can monkeypatch
    # `MainWindow._load_tasks` and observe the call.
    window._load_tasks(Path(path_str))  # noqa: SLF001


def load_tasks(window, path: Path) -> None:
    try:
        tasks = load_tasks_json(path)
    except (TaskValidationError, json.JSONDecodeError) as e:
        QMessageBox.warning(window, "Invalid task list", f"{path}: {e}")
        return
    except OSError as e:
        QMessageBox.critical(window, "Open failed", f"Could not read {path}: {e}")
        return

    window._task_table.set_tasks(tasks)  # noqa: SLF001
    window._status_label.setText(f"Loaded {len(tasks)} task(s) from {path.name}")  # noqa: SLF001


def save_tasks_dialog(window) -> None:
    try:
        tasks = window._task_table.task_specs()  # noqa: SLF001
    except TaskValidationError as e:
        QMessageBox.warning(window, "Invalid task", str(e))
        return

    path_str, _ = QFileDialog.getSaveFileName(
        window,
        "Save task list",
        "",
        "JSON files (*.json);;All files (*)",
    )
    if not path_str:
        return

    out_path = Path(path_str)
    if out_path.suffix.lower() != ".json":
        out_path = out_path.with_suffix(".json")
    try:
        save_tasks_json(out_path, tasks)
    except OSError as e:
        QMessageBox.critical(window, "Save failed", f"Could not save tasks: {e}")


def export_schedule_dialog(window) -> None:
    outcome = getattr(window, "_last_outcome", None)  # noqa: SLF001
    if outcome is None:
        QMessageBox.information(window, "Nothing to export", "Run the scheduler first.")
        return

    path_str, _ = QFileDialog.getSaveFileName(
        window,
        "Export schedule",
        "",
        "CSV files (*.csv);;All files (*)",
    )
    if not path_str:
        return

    out_path = Path(path_str)
    if out_path.suffix.lower() != ".csv":
        out_path = out_path.with_suffix(".csv")
    try:
        write_schedule_csv(out_path, outcome.schedule)
    except OSError as e:
        QMessageBox.critical(window, "Export failed", f"Could not export schedule: {e}")
