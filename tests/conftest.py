from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session", autouse=True)
def _qt_offscreen() -> None:
    """Ensure Qt can initialize in CI/headless environments."""

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session", autouse=True)
def _add_repo_root_to_syspath() -> None:
    """Make local packages importable when running tests from `tests/`."""

    root_str = str(REPO_ROOT)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


@pytest.fixture()
def demo_context(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run context wired to the bundled demo engine, with short timeouts."""

    from taskscheduler.config import RunContext

    # The engine subprocess runs in tmp_path and must still import the package.
    existing = os.environ.get("PYTHONPATH", "")
    monkeypatch.setenv(
        "PYTHONPATH",
        os.pathsep.join(p for p in (str(REPO_ROOT), existing) if p),
    )
    monkeypatch.delenv("TASKSCHEDULER_DEMO_ENGINE_MODE", raising=False)

    return RunContext(
        workdir=tmp_path,
        engine_command=(sys.executable, "-m", "taskscheduler.demo_engine"),
        poll_interval_seconds=0.01,
        engine_timeout_seconds=30.0,
        artifact_timeout_seconds=1.0,
    )
