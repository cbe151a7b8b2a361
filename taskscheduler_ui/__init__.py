"""PySide6 desktop client for the task scheduler.

This package is a *client* of the headless core:

- Core stays UI-agnostic (no Qt imports under `taskscheduler/`).
- UI runs the engine pipeline in a background thread and renders results.

Run from source:

    python -m taskscheduler_ui
"""

from __future__ import annotations

from taskscheduler.version import __version__

__all__ = ["__version__"]
