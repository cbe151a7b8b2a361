from __future__ import annotations

import threading
import time
import traceback
from dataclasses import dataclass

from PySide6.QtCore import QObject, QThread, Signal, Slot

from taskscheduler.config import RunContext
from taskscheduler.errors import RunAlreadyActiveError
from taskscheduler.model import TaskSpec
from taskscheduler.pipeline import run_pipeline
from taskscheduler.types import RunFailed


@dataclass(frozen=True)
class RunRequest:
    tasks: tuple[TaskSpec, ...]
    context: RunContext


class RunWorker(QObject):
    succeeded = Signal(int, object)  # (run_token, RunSucceeded)
    failed = Signal(int, str, str)  # (run_token, failure_kind, diagnostic)
    finished = Signal(int)  # (run_token)

    def __init__(
        self,
        *,
        run_token: int,
        request: RunRequest,
        cancel_event: threading.Event | None = None,
    ) -> None:
        super().__init__()
        self._run_token = run_token
        self._request = request
        self._cancel_event = cancel_event or threading.Event()

    @Slot()
    def run(self) -> None:
        try:
            outcome = run_pipeline(
                list(self._request.tasks),
                self._request.context,
                cancel_requested=self._cancel_event.is_set,
            )
            if isinstance(outcome, RunFailed):
                self.failed.emit(self._run_token, outcome.kind.value, outcome.diagnostic)
            else:
                self.succeeded.emit(self._run_token, outcome)
        except RunAlreadyActiveError as e:
            self.failed.emit(self._run_token, "busy", str(e))
        except Exception:  # noqa: BLE001 - show traceback for unexpected failures
            self.failed.emit(self._run_token, "error", traceback.format_exc())
        finally:
            self.finished.emit(self._run_token)


class RunController(QObject):
    """Owns the background-run lifecycle.

    Each run ends with exactly one of `succeeded` / `failed`, then `finished`.
    Cancelling terminates the engine process (if still running) and the run
    fails with kind "cancelled".
    """

    started = Signal(int)  # run_token
    succeeded = Signal(int, object)  # (run_token, RunSucceeded)
    failed = Signal(int, str, str)  # (run_token, failure_kind, diagnostic)
    finished = Signal(int, float)  # (run_token, elapsed_seconds)

    def __init__(self) -> None:
        super().__init__()
        self._next_token = 1
        self._active_token: int | None = None
        self._cancel_event: threading.Event | None = None

        # Keep strong references to QThread/QObject wrappers until the thread has
        # actually finished. Dropping the last Python ref before the underlying
        # thread stops can trigger:
        #   QThread: Destroyed while thread '' is still running
        self._thread: QThread | None = None
        self._worker: RunWorker | None = None
        self._started_at: float | None = None

    def is_running(self) -> bool:
        return self._active_token is not None

    def active_token(self) -> int | None:
        return self._active_token

    def start(self, request: RunRequest) -> int:
        if self._thread is not None:
            raise RuntimeError("Run already active")

        run_token = self._next_token
        self._next_token += 1
        self._active_token = run_token
        self._started_at = time.monotonic()
        self._cancel_event = threading.Event()

        thread = QThread()
        worker = RunWorker(run_token=run_token, request=request, cancel_event=self._cancel_event)
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.succeeded.connect(self.succeeded)
        worker.failed.connect(self.failed)
        worker.finished.connect(self._on_worker_finished)
        worker.finished.connect(thread.quit)

        thread.finished.connect(worker.deleteLater)
        thread.finished.connect(self._on_thread_finished)
        thread.finished.connect(thread.deleteLater)

        self._thread = thread
        self._worker = worker

        self.started.emit(run_token)
        thread.start()
        return run_token

    def cancel_active(self) -> None:
        if self._active_token is None or self._cancel_event is None:
            return
        self._cancel_event.set()

    def is_cancel_requested(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    @Slot()
    def shutdown(self) -> None:
        """Cancel any active run and wait for its worker thread to stop."""

        if self._thread is None:
            return

        self.cancel_active()
        try:
            self._thread.wait()
        except RuntimeError:
            # Can happen during interpreter teardown.
            pass

    @Slot(int)
    def _on_worker_finished(self, run_token: int) -> None:
        elapsed = 0.0
        if self._started_at is not None:
            elapsed = max(0.0, time.monotonic() - self._started_at)

        # Don't clear thread/worker references here. The worker emits `finished`
        # before the QThread has fully stopped; refs are cleared in
        # `_on_thread_finished`.
        self.finished.emit(run_token, elapsed)

    @Slot()
    def _on_thread_finished(self) -> None:
        self._thread = None
        self._worker = None
        self._active_token = None
        self._started_at = None
        self._cancel_event = None
