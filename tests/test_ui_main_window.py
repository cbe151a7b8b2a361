from __future__ import annotations

import json
from pathlib import Path

from taskscheduler.config import RunContext
from taskscheduler.model import TaskSpec
from taskscheduler.types import RunSucceeded, ScheduleEntry, SummaryReport, TimelineEntry


def _ensure_qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def _fake_controller_cls():
    from PySide6.QtCore import QObject, Signal

    class _FakeController(QObject):
        started = Signal(int)
        succeeded = Signal(int, object)
        failed = Signal(int, str, str)
        finished = Signal(int, float)

        def __init__(self) -> None:
            super().__init__()
            self._running = False
            self._next = 1
            self.last_request = None
            self.cancelled = False
            self.shut_down = False

        def is_running(self) -> bool:
            return self._running

        def start(self, request) -> int:
            self.last_request = request
            self._running = True
            tok = self._next
            self._next += 1
            self.started.emit(tok)
            return tok

        def cancel_active(self) -> None:
            self.cancelled = True

        def shutdown(self) -> None:
            self.shut_down = True
            self._running = False

        def finish(self, tok: int) -> None:
            self._running = False
            self.finished.emit(tok, 0.25)

    return _FakeController


def _outcome() -> RunSucceeded:
    return RunSucceeded(
        schedule=[ScheduleEntry("T2", "1", "3", "0", "3"), ScheduleEntry("T1", "2", "5", "3", "8")],
        summary=SummaryReport(average_waiting_time=1.5, average_turnaround_time=5.5),
        timeline=[TimelineEntry("T2", 0.0, 3.0), TimelineEntry("T1", 3.0, 8.0)],
    )


def _window(tmp_path: Path):
    from taskscheduler_ui.main_window import MainWindow

    controller = _fake_controller_cls()()
    ctx = RunContext(workdir=tmp_path, engine_command=("engine",))
    return MainWindow(run_controller=controller, context=ctx), controller


def test_run_success_renders_results(monkeypatch, tmp_path: Path) -> None:
    app = _ensure_qapp()

    w, controller = _window(tmp_path)
    w.show()
    app.processEvents()

    assert w.windowTitle() == "Task Scheduler App"
    assert not w._cancel_btn.isEnabled()
    assert not w._export_action.isEnabled()

    w._task_table.set_tasks([TaskSpec("T1", 2, 5, 0), TaskSpec("T2", 1, 3, 0)])
    w._on_run_clicked()

    assert controller.last_request.tasks == (TaskSpec("T1", 2, 5, 0), TaskSpec("T2", 1, 3, 0))
    assert controller.last_request.context is w._context
    assert w._cancel_btn.isEnabled()
    assert not w._run_btn.isEnabled()
    assert not w._task_table.table.isEnabled()

    # Clicking again while running is ignored.
    w._on_run_clicked()
    assert controller._next == 2

    controller.succeeded.emit(1, _outcome())
    controller.finish(1)

    assert w._status_label.text() == "Completed"
    assert w._results_table.rowCount() == 2
    assert w._results_table.item(0, 0).text() == "T2"
    assert len(w._timeline.entries()) == 2
    assert "1.50" in w._averages_label.text()
    assert w._elapsed_label.text() == "0.25s"
    assert w._run_btn.isEnabled()
    assert w._export_action.isEnabled()

    # Export writes the CSV, forcing the suffix.
    from PySide6.QtWidgets import QFileDialog

    out = tmp_path / "schedule"
    monkeypatch.setattr(QFileDialog, "getSaveFileName", lambda *_a, **_k: (str(out), ""))
    w._export_schedule_dialog()
    assert (tmp_path / "schedule.csv").read_text(encoding="utf-8").startswith("position,name")

    w.close()
    assert controller.shut_down


def test_run_failures_and_cancel(monkeypatch, tmp_path: Path) -> None:
    _ensure_qapp()

    from PySide6.QtWidgets import QMessageBox

    shown: list[tuple[str, str]] = []
    monkeypatch.setattr(QMessageBox, "warning", lambda _w, title, text: shown.append((title, text)))
    monkeypatch.setattr(QMessageBox, "critical", lambda _w, title, text: shown.append((title, text)))

    w, controller = _window(tmp_path)

    # Invalid row: never reaches the controller.
    w._task_table.add_row(("T1", "x", "1", "0"))
    w._on_run_clicked()
    assert controller.last_request is None
    assert shown[-1][0] == "Invalid task"
    assert "row 1" in shown[-1][1]

    w._task_table.set_tasks([TaskSpec("T1", 1, 1, 0)])
    w._on_run_clicked()
    controller.failed.emit(1, "invocation", "Scheduler execution failed with exit code: 3")
    controller.finish(1)
    assert w._status_label.text() == "Failed"
    assert shown[-1] == ("Execution error", "Scheduler execution failed with exit code: 3")

    # Cancel: the failure is reported as a cancellation, not an error.
    count = len(shown)
    w._on_run_clicked()
    w._on_cancel_clicked()
    assert controller.cancelled
    assert w._status_label.text() == "Cancelling…"
    controller.failed.emit(2, "cancelled", "Run cancelled; engine terminated")
    controller.finish(2)
    assert w._status_label.text() == "Cancelled"
    assert len(shown) == count

    # Cancel with nothing running is a no-op.
    controller.cancelled = False
    w._on_cancel_clicked()
    assert not controller.cancelled


def test_load_and_save_tasks(monkeypatch, tmp_path: Path) -> None:
    _ensure_qapp()

    from PySide6.QtWidgets import QFileDialog, QMessageBox

    shown: list[str] = []
    monkeypatch.setattr(QMessageBox, "warning", lambda _w, title, _t: shown.append(title))
    monkeypatch.setattr(QMessageBox, "critical", lambda _w, title, _t: shown.append(title))
    monkeypatch.setattr(QMessageBox, "information", lambda _w, title, _t: shown.append(title))

    w, _controller = _window(tmp_path)

    src = tmp_path / "tasks.json"
    src.write_text(
        json.dumps([{"name": "A", "priority": 1, "duration": 2, "deadline": 0}]),
        encoding="utf-8",
    )
    monkeypatch.setattr(QFileDialog, "getOpenFileName", lambda *_a, **_k: (str(src), ""))
    w._open_tasks_dialog()
    assert w._task_table.rows() == [("A", "1", "2", "0")]
    assert "Loaded 1 task(s)" in w._status_label.text()

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    w._load_tasks(bad)
    assert shown == ["Invalid task list"]

    w._load_tasks(tmp_path / "missing.json")
    assert shown[-1] == "Open failed"

    not_objects = tmp_path / "numbers.json"
    not_objects.write_text("[1, 2]", encoding="utf-8")
    w._load_tasks(not_objects)
    assert shown[-1] == "Invalid task list"
    assert w._task_table.rows() == [("A", "1", "2", "0")]

    out = tmp_path / "saved"
    monkeypatch.setattr(QFileDialog, "getSaveFileName", lambda *_a, **_k: (str(out), ""))
    w._save_tasks_dialog()
    saved = json.loads((tmp_path / "saved.json").read_text(encoding="utf-8"))
    assert saved == [{"name": "A", "priority": 1, "duration": 2, "deadline": 0}]

    # Dialog cancelled: nothing written.
    monkeypatch.setattr(QFileDialog, "getSaveFileName", lambda *_a, **_k: ("", ""))
    w._save_tasks_dialog()
    w._export_schedule_dialog()
    assert shown[-1] == "Nothing to export"
