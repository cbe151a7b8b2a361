from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from taskscheduler.errors import ArtifactTimeoutError, RunCancelledError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.2


def wait_for_artifacts(
    paths: Sequence[Path],
    *,
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    timeout_seconds: float,
    cancel_requested: Callable[[], bool] | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """Block until every path exists.

    Raises `ArtifactTimeoutError` once `timeout_seconds` have passed and
    `RunCancelledError` as soon as `cancel_requested()` is true.
    """

    deadline = clock() + max(0.0, timeout_seconds)
    while True:
        missing = [p for p in paths if not p.exists()]
        if not missing:
            logger.info("Artifacts ready: %s", ", ".join(p.name for p in paths))
            return

        if cancel_requested is not None and cancel_requested():
            raise RunCancelledError("Run cancelled while waiting for engine artifacts")

        if clock() >= deadline:
            names = tuple(str(p) for p in missing)
            raise ArtifactTimeoutError(
                f"Engine artifacts not found after {timeout_seconds:g}s: {', '.join(names)}",
                missing=names,
            )

        sleep(interval_seconds)
