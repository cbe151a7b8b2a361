"""Run context: where the engine lives and where its files go."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunContext:
    """Explicit configuration threaded through every pipeline stage."""

    workdir: Path
    engine_command: tuple[str, ...]
    input_name: str = "input.txt"
    output_name: str = "taskoutput.txt"
    summary_name: str = "task_summary.txt"
    log_name: str = "engine_output.log"
    # The engine accepts `input output summary` as optional argv.
    pass_artifact_paths: bool = True
    poll_interval_seconds: float = 0.2
    engine_timeout_seconds: float = 60.0
    artifact_timeout_seconds: float = 10.0

    @property
    def input_path(self) -> Path:
        return self.workdir / self.input_name

    @property
    def output_path(self) -> Path:
        return self.workdir / self.output_name

    @property
    def summary_path(self) -> Path:
        return self.workdir / self.summary_name

    @property
    def engine_log_path(self) -> Path:
        return self.workdir / self.log_name

    def engine_argv(self) -> list[str]:
        argv = list(self.engine_command)
        if self.pass_artifact_paths:
            argv += [str(self.input_path), str(self.output_path), str(self.summary_path)]
        return argv

    @classmethod
    def from_env(
        cls,
        workdir: Path | None = None,
        engine_command: tuple[str, ...] | None = None,
    ) -> RunContext:
        """Load the context from environment with local-development defaults.

        Explicit arguments win over `TASKSCHEDULER_*` variables.
        """

        resolved_workdir = (
            workdir or Path(os.getenv("TASKSCHEDULER_WORKDIR", "."))
        ).resolve()
        command = engine_command or _engine_command_from_env(resolved_workdir)
        return cls(
            workdir=resolved_workdir,
            engine_command=command,
            pass_artifact_paths=_env_flag("TASKSCHEDULER_PASS_PATHS", default=True),
            poll_interval_seconds=float(os.getenv("TASKSCHEDULER_POLL_INTERVAL", "0.2")),
            engine_timeout_seconds=float(os.getenv("TASKSCHEDULER_ENGINE_TIMEOUT", "60")),
            artifact_timeout_seconds=float(
                os.getenv("TASKSCHEDULER_ARTIFACT_TIMEOUT", "10")
            ),
        )


def parse_engine_command(raw: str) -> tuple[str, ...]:
    argv = tuple(shlex.split(raw, posix=os.name != "nt"))
    if not argv:
        raise ValueError("engine command is empty")
    return argv


def _engine_command_from_env(workdir: Path) -> tuple[str, ...]:
    raw = os.getenv("TASKSCHEDULER_ENGINE", "").strip()
    if raw:
        return parse_engine_command(raw)
    exe = "trial.exe" if os.name == "nt" else "trial"
    return (str(workdir / exe),)


def _env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}
