from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from taskscheduler.config import RunContext
from taskscheduler.decode import decode_result_artifact, decode_summary_report
from taskscheduler.engine import run_engine
from taskscheduler.errors import (
    ArtifactTimeoutError,
    EngineStartError,
    ResultDecodeError,
    RunAlreadyActiveError,
    RunCancelledError,
    SerializationError,
    TaskValidationError,
)
from taskscheduler.model import TaskSpec
from taskscheduler.reconcile import derive_timeline, reconcile
from taskscheduler.serialize import write_engine_input
from taskscheduler.types import FailureKind, RunFailed, RunOutcome, RunSucceeded
from taskscheduler.validate import validate_tasks
from taskscheduler.watch import wait_for_artifacts

logger = logging.getLogger(__name__)

# Input and artifact files share the workdir without locking, so at most one
# run may use a given workdir at a time.
_active_workdirs: set[Path] = set()
_active_lock = threading.Lock()


@contextmanager
def _exclusive_workdir(workdir: Path) -> Iterator[None]:
    key = workdir.resolve()
    with _active_lock:
        if key in _active_workdirs:
            raise RunAlreadyActiveError(f"Run already active in {key}")
        _active_workdirs.add(key)
    try:
        yield
    finally:
        with _active_lock:
            _active_workdirs.discard(key)


def run_pipeline(
    tasks: Sequence[TaskSpec],
    context: RunContext,
    *,
    cancel_requested: Callable[[], bool] | None = None,
) -> RunOutcome:
    """Serialize, run the engine, wait for its artifacts, decode and reconcile.

    Expected failures come back as `RunFailed`; a second concurrent run in the
    same workdir raises `RunAlreadyActiveError`.
    """

    with _exclusive_workdir(context.workdir):
        return _run(tasks, context, cancel_requested)


def _failed(kind: FailureKind, diagnostic: str) -> RunFailed:
    logger.error("Run failed (%s): %s", kind.value, diagnostic)
    return RunFailed(kind=kind, diagnostic=diagnostic)


def _run(
    tasks: Sequence[TaskSpec],
    context: RunContext,
    cancel_requested: Callable[[], bool] | None,
) -> RunOutcome:
    try:
        validate_tasks(tasks)
    except TaskValidationError as e:
        return _failed(FailureKind.VALIDATION, str(e))

    try:
        _clear_stale_artifacts(context)
        write_engine_input(context.input_path, tasks)
    except SerializationError as e:
        return _failed(FailureKind.SERIALIZATION, str(e))

    try:
        invocation = run_engine(context, cancel_requested=cancel_requested)
    except EngineStartError as e:
        return _failed(FailureKind.INVOCATION, str(e))

    if invocation.cancelled:
        return _failed(FailureKind.CANCELLED, "Run cancelled; engine terminated")
    if invocation.timed_out:
        return _failed(
            FailureKind.TIMEOUT,
            f"Scheduler did not finish within {context.engine_timeout_seconds:g}s"
            f"\nOutput: {invocation.output}",
        )
    if invocation.exit_code != 0:
        return _failed(
            FailureKind.INVOCATION,
            f"Scheduler execution failed with exit code: {invocation.exit_code}"
            f"\nOutput: {invocation.output}",
        )

    try:
        wait_for_artifacts(
            [context.output_path, context.summary_path],
            interval_seconds=context.poll_interval_seconds,
            timeout_seconds=context.artifact_timeout_seconds,
            cancel_requested=cancel_requested,
        )
    except ArtifactTimeoutError as e:
        return _failed(FailureKind.TIMEOUT, str(e))
    except RunCancelledError as e:
        return _failed(FailureKind.CANCELLED, str(e))

    return decode_artifacts(context, engine_output=invocation.output)


def _clear_stale_artifacts(context: RunContext) -> None:
    for path in (context.output_path, context.summary_path):
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise SerializationError(f"Could not remove stale artifact {path}: {e}") from e


def decode_artifacts(context: RunContext, *, engine_output: str = "") -> RunOutcome:
    """Decode the result and summary artifacts already present in the workdir."""

    try:
        output_text = context.output_path.read_text(encoding="utf-8", errors="replace")
        summary_text = context.summary_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        return _failed(FailureKind.DECODE, f"Failed to read output files: {e}")

    logger.debug("Result artifact:\n%s", output_text)
    logger.debug("Summary artifact:\n%s", summary_text)

    try:
        decoded = decode_result_artifact(output_text)
        summary = decode_summary_report(summary_text)
    except ResultDecodeError as e:
        return _failed(FailureKind.DECODE, f"{context.output_path.name}: {e}")

    schedule = reconcile(decoded.attributes, decoded.execution_order)
    timeline = derive_timeline(schedule)
    logger.info("Run produced %d scheduled task(s)", len(schedule))
    return RunSucceeded(
        schedule=schedule,
        summary=summary,
        timeline=timeline,
        summary_text=summary_text,
        engine_output=engine_output,
    )
