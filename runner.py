"""Repo-root convenience shim for launching the Task Scheduler UI.

    python runner.py

It delegates to the canonical UI entry point:

    python -m taskscheduler_ui
"""

from __future__ import annotations

import sys


def main() -> int:
    """Launch the Task Scheduler UI.

    Arguments are forwarded exactly as in `python -m taskscheduler_ui`.
    """

    from taskscheduler_ui.__main__ import main as ui_main

    sys.argv = ["taskscheduler_ui", *sys.argv[1:]]

    return ui_main()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
