from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import replace
from pathlib import Path

from taskscheduler.config import RunContext, parse_engine_command
from taskscheduler.io import load_tasks_json, write_schedule_csv, write_summary_json
from taskscheduler.pipeline import decode_artifacts, run_pipeline
from taskscheduler.serialize import write_engine_input
from taskscheduler.types import RunFailed, RunOutcome, RunSucceeded
from taskscheduler.validate import validate_tasks


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="taskscheduler", description="Task scheduler front-end")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    run = sub.add_parser("run", help="Run the scheduling engine for a task list")
    run.add_argument("--tasks", required=True, type=Path)
    _add_context_args(run)
    run.add_argument("--engine-timeout", required=False, type=float)
    run.add_argument("--artifact-timeout", required=False, type=float)
    _add_output_args(run)

    enc = sub.add_parser("encode", help="Write the engine input file only")
    enc.add_argument("--tasks", required=True, type=Path)
    enc.add_argument("--out", required=True, type=Path)

    dec = sub.add_parser("decode", help="Decode existing engine artifacts")
    _add_context_args(dec)
    _add_output_args(dec)
    return p


def _add_context_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--workdir", required=False, type=Path)
    p.add_argument(
        "--engine",
        required=False,
        help="Engine command line (default: $TASKSCHEDULER_ENGINE or ./trial)",
    )


def _add_output_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--out-schedule", required=False, type=Path)
    p.add_argument("--out-summary", required=False, type=Path)


def _context_from_args(args: argparse.Namespace) -> RunContext:
    command = parse_engine_command(args.engine) if args.engine else None
    ctx = RunContext.from_env(workdir=args.workdir, engine_command=command)
    overrides = {}
    if getattr(args, "engine_timeout", None) is not None:
        overrides["engine_timeout_seconds"] = args.engine_timeout
    if getattr(args, "artifact_timeout", None) is not None:
        overrides["artifact_timeout_seconds"] = args.artifact_timeout
    if overrides:
        ctx = replace(ctx, **overrides)
    return ctx


def _fmt_avg(value: float) -> str:
    return "-" if math.isnan(value) else f"{value:.2f}"


def _report(outcome: RunOutcome, args: argparse.Namespace) -> int:
    if isinstance(outcome, RunFailed):
        sys.stderr.write(f"Run failed ({outcome.kind.value}): {outcome.diagnostic}\n")
        return 1

    assert isinstance(outcome, RunSucceeded)
    rows = [("Task", "Priority", "Duration", "Waiting Time", "Turnaround Time")]
    rows += [
        (e.name, e.priority, e.duration, e.waiting_time, e.turnaround_time)
        for e in outcome.schedule
    ]
    widths = [max(len(r[i]) for r in rows) for i in range(5)]
    for r in rows:
        print("  ".join(cell.ljust(w) for cell, w in zip(r, widths)).rstrip())
    print()
    print(f"Average Waiting Time: {_fmt_avg(outcome.summary.average_waiting_time)}")
    print(f"Average Turnaround Time: {_fmt_avg(outcome.summary.average_turnaround_time)}")

    if args.out_schedule:
        write_schedule_csv(args.out_schedule, outcome.schedule)
    if args.out_summary:
        write_summary_json(args.out_summary, outcome)
    return 0


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.cmd == "run":
        tasks = load_tasks_json(args.tasks)
        return _report(run_pipeline(tasks, _context_from_args(args)), args)

    if args.cmd == "encode":
        tasks = load_tasks_json(args.tasks)
        validate_tasks(tasks)
        write_engine_input(args.out, tasks)
        return 0

    if args.cmd == "decode":
        return _report(decode_artifacts(_context_from_args(args)), args)

    raise AssertionError(f"Unhandled command: {args.cmd}")
