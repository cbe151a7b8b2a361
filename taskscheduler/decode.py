"""Decoders for the engine's result artifacts.

The result artifact looks like JSON but is not guaranteed to be valid JSON, so
it is read with a fixed-grammar scraper that the existing engine's output is
known to satisfy:

- exactly one `"executionOrder": [` and one `"taskDetails": [` marker;
- no nested brackets or braces inside a task block;
- no commas inside values.

Anything outside that grammar either raises `ResultDecodeError` (missing
marker or bracket) or segments wrongly (a comma inside a value splits it).

The summary artifact is plain line-prefixed text and is decoded separately.
"""

from __future__ import annotations

import logging
import math
import re

from taskscheduler.errors import ResultDecodeError
from taskscheduler.types import DecodedResult, RawTaskAttributes, SummaryReport, SummaryTask

logger = logging.getLogger(__name__)

EXECUTION_ORDER_MARKER = '"executionOrder": ['
TASK_DETAILS_MARKER = '"taskDetails": ['
LIST_END = "]"
BLOCK_SEPARATOR = "},"

ATTRIBUTE_KEYS = ("priority", "burst_time", "waitingTime", "turnaroundTime")
_KEYS_BY_TOKEN = {k.lower(): k for k in ("name", *ATTRIBUTE_KEYS)}

_NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?")


def _marked_segment(text: str, marker: str) -> str:
    start = text.find(marker)
    if start < 0:
        raise ResultDecodeError(f"result artifact has no {marker!r} marker")
    start += len(marker)
    end = text.find(LIST_END, start)
    if end < 0:
        raise ResultDecodeError(f"result artifact has no closing ']' after {marker!r}")
    return text[start:end]


def _unquote(token: str) -> str:
    return token.strip().replace('"', "").strip()


def decode_execution_order(text: str) -> list[str]:
    segment = _marked_segment(text, EXECUTION_ORDER_MARKER)
    order = [_unquote(part) for part in segment.split(",")]
    return [name for name in order if name]


def decode_task_details(text: str) -> RawTaskAttributes:
    segment = _marked_segment(text, TASK_DETAILS_MARKER)

    attributes: RawTaskAttributes = {}
    for block in segment.split(BLOCK_SEPARATOR):
        block = block.replace("{", "").replace("}", "").strip()
        if not block:
            continue

        name = ""
        record: dict[str, str] = {}
        for field in block.split(","):
            key_token, sep, value = field.partition(":")
            if not sep:
                continue
            key = _KEYS_BY_TOKEN.get(_unquote(key_token).lower())
            if key is None:
                continue
            if key == "name":
                name = _unquote(value)
            else:
                record[key] = _unquote(value)

        if not name:
            logger.warning("Discarding task block without a name: %r", block)
            continue
        attributes[name] = record

    return attributes


def decode_result_artifact(text: str) -> DecodedResult:
    order = decode_execution_order(text)
    attributes = decode_task_details(text)
    logger.info(
        "Decoded result artifact: %d ordered name(s), %d task block(s)",
        len(order),
        len(attributes),
    )
    return DecodedResult(execution_order=order, attributes=attributes)


_SUMMARY_FIELDS = (
    ("Priority:", "priority"),
    ("Duration:", "duration"),
    ("Waiting Time:", "waiting_time"),
    ("Turnaround Time:", "turnaround_time"),
)
_AVG_WAITING = "Average Waiting Time:"
_AVG_TURNAROUND = "Average Turnaround Time:"


def _strip_decoration(line: str) -> str:
    # The reference engine prefixes some summary lines with an emoji.
    i = 0
    while i < len(line) and not line[i].isalnum():
        i += 1
    return line[i:]


def _leading_number(value: str) -> float:
    m = _NUMBER_RE.search(value)
    if m is None:
        return math.nan
    return float(m.group(0))


def decode_summary_report(text: str) -> SummaryReport:
    tasks: list[SummaryTask] = []
    current: dict[str, str] | None = None
    avg_waiting = math.nan
    avg_turnaround = math.nan

    def _flush() -> None:
        if current is not None:
            tasks.append(SummaryTask(**current))

    for raw_line in text.splitlines():
        line = _strip_decoration(raw_line.strip())

        if line.startswith("Task:"):
            _flush()
            current = {"name": line[len("Task:"):].strip()}
            continue
        if line.startswith(_AVG_WAITING):
            avg_waiting = _leading_number(line[len(_AVG_WAITING):])
            continue
        if line.startswith(_AVG_TURNAROUND):
            avg_turnaround = _leading_number(line[len(_AVG_TURNAROUND):])
            continue

        for prefix, attr in _SUMMARY_FIELDS:
            if line.startswith(prefix):
                if current is not None:
                    current[attr] = line[len(prefix):].strip()
                break

    _flush()
    return SummaryReport(
        tasks=tasks,
        average_waiting_time=avg_waiting,
        average_turnaround_time=avg_turnaround,
    )
