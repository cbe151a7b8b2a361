from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from taskscheduler.types import RawTaskAttributes, ScheduleEntry, TimelineEntry

logger = logging.getLogger(__name__)


def reconcile(
    attributes: RawTaskAttributes, execution_order: Sequence[str]
) -> list[ScheduleEntry]:
    """Merge decoded attributes into the engine's execution order.

    The order is the index and the attributes are the payload: ordered names
    without attributes are skipped, attribute-only names are dropped, and a
    repeated name keeps its first position.
    """

    schedule: list[ScheduleEntry] = []
    emitted: set[str] = set()
    for name in execution_order:
        if name in emitted:
            continue
        record = attributes.get(name)
        if record is None:
            logger.warning("Task '%s' is in the execution order but has no details", name)
            continue
        emitted.add(name)
        schedule.append(
            ScheduleEntry(
                name=name,
                priority=record.get("priority", ""),
                duration=record.get("burst_time", ""),
                waiting_time=record.get("waitingTime", ""),
                turnaround_time=record.get("turnaroundTime", ""),
            )
        )

    for name in attributes:
        if name not in emitted:
            logger.warning("Task '%s' has details but is not in the execution order", name)

    return schedule


def derive_timeline(schedule: Sequence[ScheduleEntry]) -> list[TimelineEntry]:
    """Map each entry onto a shared time axis: waiting time to turnaround time.

    Entries whose values are not finite numbers are skipped individually.
    """

    timeline: list[TimelineEntry] = []
    for entry in schedule:
        try:
            start = float(entry.waiting_time)
            end = float(entry.turnaround_time)
        except ValueError:
            start = end = math.nan
        if not (math.isfinite(start) and math.isfinite(end)):
            logger.warning(
                "Skipping timeline for '%s': non-numeric times (%r, %r)",
                entry.name,
                entry.waiting_time,
                entry.turnaround_time,
            )
            continue
        timeline.append(TimelineEntry(name=entry.name, start=start, end=end))
    return timeline
