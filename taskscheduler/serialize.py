from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from taskscheduler.errors import SerializationError
from taskscheduler.model import TaskSpec

logger = logging.getLogger(__name__)

# Dependency modeling is not implemented; the engine always gets zero edges.
DEPENDENCY_COUNT = 0


def encode_engine_input(tasks: Sequence[TaskSpec]) -> str:
    """Render the engine's line-oriented input.

    Fields are written as-is, separated by single spaces. Nothing is quoted or
    escaped, so a field containing whitespace would shift the engine's reads;
    `validate_tasks` rejects such names before a run gets here.
    """

    lines = [str(len(tasks))]
    for t in tasks:
        lines.append(f"{t.name} {t.priority} {t.duration} {t.deadline}")
    lines.append(str(DEPENDENCY_COUNT))
    return "\n".join(lines) + "\n"


def write_engine_input(path: Path, tasks: Sequence[TaskSpec]) -> None:
    text = encode_engine_input(tasks)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise SerializationError(f"Error writing engine input {path}: {e}") from e
    logger.info("Wrote %d task(s) to %s", len(tasks), path)
