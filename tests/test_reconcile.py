from __future__ import annotations

import logging

from taskscheduler.reconcile import derive_timeline, reconcile
from taskscheduler.types import ScheduleEntry, TimelineEntry


def _attrs(wait: str, tat: str, priority: str = "1", burst: str = "1") -> dict[str, str]:
    return {
        "priority": priority,
        "burst_time": burst,
        "waitingTime": wait,
        "turnaroundTime": tat,
    }


def test_order_wins_and_attribute_only_names_are_dropped(caplog) -> None:
    attributes = {"A": _attrs("3", "5"), "B": _attrs("0", "3"), "C": _attrs("5", "9")}

    with caplog.at_level(logging.WARNING, logger="taskscheduler.reconcile"):
        schedule = reconcile(attributes, ["B", "A"])

    assert [e.name for e in schedule] == ["B", "A"]
    assert "'C' has details but is not in the execution order" in caplog.text


def test_ordered_names_without_details_are_skipped() -> None:
    schedule = reconcile({"A": _attrs("0", "2")}, ["X", "A", "Y"])
    assert [e.name for e in schedule] == ["A"]


def test_result_is_intersection_in_execution_order() -> None:
    order = ["D", "B", "Z", "A"]
    attributes = {name: _attrs("0", "1") for name in ("A", "B", "C", "D")}

    schedule = reconcile(attributes, order)

    expected = [n for n in order if n in attributes]
    assert [e.name for e in schedule] == expected


def test_repeated_order_name_keeps_first_position() -> None:
    schedule = reconcile({"A": _attrs("0", "1"), "B": _attrs("1", "2")}, ["A", "B", "A"])
    assert [e.name for e in schedule] == ["A", "B"]


def test_entry_fields_map_from_engine_keys() -> None:
    (entry,) = reconcile({"A": _attrs("4", "9", priority="2", burst="5")}, ["A"])
    assert entry == ScheduleEntry(
        name="A", priority="2", duration="5", waiting_time="4", turnaround_time="9"
    )


def test_missing_attribute_fields_become_empty_text() -> None:
    (entry,) = reconcile({"A": {"priority": "1"}}, ["A"])
    assert entry.duration == ""
    assert entry.waiting_time == ""


def test_timeline_uses_waiting_and_turnaround_times() -> None:
    schedule = reconcile({"A": _attrs("0", "5"), "B": _attrs("5", "8")}, ["A", "B"])

    timeline = derive_timeline(schedule)

    assert timeline == [TimelineEntry("A", 0.0, 5.0), TimelineEntry("B", 5.0, 8.0)]
    assert timeline[1].duration == 3.0


def test_timeline_skips_non_numeric_entries_only(caplog) -> None:
    schedule = reconcile(
        {"A": _attrs("0", "5"), "B": _attrs("x", "8"), "C": {"priority": "1"}},
        ["A", "B", "C"],
    )

    with caplog.at_level(logging.WARNING, logger="taskscheduler.reconcile"):
        timeline = derive_timeline(schedule)

    assert [t.name for t in timeline] == ["A"]
    assert "Skipping timeline for 'B'" in caplog.text


def test_timeline_skips_infinite_and_nan_times(caplog) -> None:
    schedule = reconcile(
        {
            "A": _attrs("0", "inf"),
            "B": _attrs("nan", "3"),
            "C": _attrs("1e999", "4"),
            "D": _attrs("3", "6"),
        },
        ["A", "B", "C", "D"],
    )

    with caplog.at_level(logging.WARNING, logger="taskscheduler.reconcile"):
        timeline = derive_timeline(schedule)

    assert timeline == [TimelineEntry("D", 3.0, 6.0)]
    assert "Skipping timeline for 'A'" in caplog.text
    assert "Skipping timeline for 'B'" in caplog.text
