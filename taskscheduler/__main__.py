from __future__ import annotations

from taskscheduler.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
