"""Subprocess runner for the external scheduling engine."""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable

from taskscheduler.config import RunContext
from taskscheduler.errors import EngineStartError
from taskscheduler.types import EngineInvocation

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124

_POLL_SECONDS = 0.05


def run_engine(
    context: RunContext,
    *,
    cancel_requested: Callable[[], bool] | None = None,
) -> EngineInvocation:
    """Run the engine in `context.workdir` and wait for it to exit.

    stdout and stderr are merged into the engine log file, which is read back
    as the invocation's diagnostic output.
    """

    argv = context.engine_argv()
    log_path = context.engine_log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Starting engine: %s (cwd=%s)", argv, context.workdir)

    try:
        with log_path.open("w", encoding="utf-8") as log_handle:
            exit_code, timed_out, cancelled = _run_until_exit(
                argv=argv,
                cwd=str(context.workdir),
                log_handle=log_handle,
                timeout_seconds=context.engine_timeout_seconds,
                cancel_requested=cancel_requested,
            )
    except FileNotFoundError as e:
        raise EngineStartError(f"Scheduler executable not found: {argv[0]}") from e
    except OSError as e:
        raise EngineStartError(f"Scheduler failed to start: {e}") from e

    output = log_path.read_text(encoding="utf-8", errors="replace")
    logger.info(
        "Engine exited with code %d (timed_out=%s, cancelled=%s)",
        exit_code,
        timed_out,
        cancelled,
    )
    logger.debug("Engine output:\n%s", output)
    return EngineInvocation(
        exit_code=exit_code,
        output=output,
        timed_out=timed_out,
        cancelled=cancelled,
    )


def _run_until_exit(
    *,
    argv: list[str],
    cwd: str,
    log_handle,
    timeout_seconds: float,
    cancel_requested: Callable[[], bool] | None,
) -> tuple[int, bool, bool]:
    process = subprocess.Popen(  # noqa: S603
        argv,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=log_handle,
        stderr=subprocess.STDOUT,
    )
    started = time.monotonic()

    while True:
        returncode = process.poll()
        if returncode is not None:
            return returncode, False, False

        if cancel_requested is not None and cancel_requested():
            logger.warning("Cancellation requested; terminating engine pid %d", process.pid)
            _terminate_process(process)
            return TIMEOUT_EXIT_CODE, False, True

        if time.monotonic() - started >= timeout_seconds:
            logger.warning(
                "Engine exceeded %.1fs; terminating pid %d", timeout_seconds, process.pid
            )
            _terminate_process(process)
            return TIMEOUT_EXIT_CODE, True, False

        time.sleep(_POLL_SECONDS)


def _terminate_process(process: subprocess.Popen) -> None:
    try:
        process.terminate()
    except OSError:
        return
    try:
        process.wait(timeout=2)
    except subprocess.TimeoutExpired:
        try:
            process.kill()
        except OSError:
            return
        process.wait(timeout=2)
