from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# name -> {"priority", "burst_time", "waitingTime", "turnaroundTime"}, values as text
RawTaskAttributes = dict[str, dict[str, str]]


@dataclass(frozen=True)
class DecodedResult:
    execution_order: list[str]
    attributes: RawTaskAttributes


@dataclass(frozen=True)
class ScheduleEntry:
    name: str
    priority: str
    duration: str
    waiting_time: str
    turnaround_time: str


@dataclass(frozen=True)
class SummaryTask:
    name: str
    priority: str = ""
    duration: str = ""
    waiting_time: str = ""
    turnaround_time: str = ""


@dataclass(frozen=True)
class SummaryReport:
    tasks: list[SummaryTask] = field(default_factory=list)
    average_waiting_time: float = math.nan
    average_turnaround_time: float = math.nan


@dataclass(frozen=True)
class TimelineEntry:
    name: str
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class EngineInvocation:
    exit_code: int
    output: str
    timed_out: bool = False
    cancelled: bool = False


class FailureKind(str, Enum):
    VALIDATION = "validation"
    SERIALIZATION = "serialization"
    INVOCATION = "invocation"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    DECODE = "decode"


@dataclass(frozen=True)
class RunSucceeded:
    schedule: list[ScheduleEntry]
    summary: SummaryReport
    timeline: list[TimelineEntry]
    summary_text: str = ""
    engine_output: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class RunFailed:
    kind: FailureKind
    diagnostic: str

    @property
    def ok(self) -> bool:
        return False


RunOutcome = Union[RunSucceeded, RunFailed]
