from __future__ import annotations

from pathlib import Path

import pytest

from taskscheduler.errors import ArtifactTimeoutError, RunCancelledError
from taskscheduler.watch import wait_for_artifacts


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_returns_immediately_when_artifacts_exist(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("x", encoding="utf-8")
    b.write_text("y", encoding="utf-8")
    clock = _FakeClock()

    wait_for_artifacts([a, b], timeout_seconds=1.0, sleep=clock.sleep, clock=clock)

    assert clock.sleeps == []


def test_polls_at_interval_until_both_exist(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("x", encoding="utf-8")
    clock = _FakeClock()

    def _sleep(seconds: float) -> None:
        clock.sleep(seconds)
        if len(clock.sleeps) == 3:
            b.write_text("y", encoding="utf-8")

    wait_for_artifacts(
        [a, b], interval_seconds=0.2, timeout_seconds=10.0, sleep=_sleep, clock=clock
    )

    assert clock.sleeps == [0.2, 0.2, 0.2]


def test_times_out_naming_missing_artifacts(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("x", encoding="utf-8")
    clock = _FakeClock()

    with pytest.raises(ArtifactTimeoutError) as exc:
        wait_for_artifacts(
            [a, b], interval_seconds=0.2, timeout_seconds=1.0, sleep=clock.sleep, clock=clock
        )

    assert exc.value.missing == (str(b),)
    assert "b.txt" in str(exc.value)
    assert clock.now >= 1.0


def test_cancellation_stops_the_wait(tmp_path: Path) -> None:
    clock = _FakeClock()
    calls = {"n": 0}

    def _cancel() -> bool:
        calls["n"] += 1
        return calls["n"] >= 2

    with pytest.raises(RunCancelledError):
        wait_for_artifacts(
            [tmp_path / "never.txt"],
            timeout_seconds=100.0,
            cancel_requested=_cancel,
            sleep=clock.sleep,
            clock=clock,
        )

    assert len(clock.sleeps) == 1
