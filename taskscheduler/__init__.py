"""Headless core of the task scheduler front-end.

Serializes task lists for the external scheduling engine, runs it, and turns
its result artifacts into an ordered schedule. No GUI imports; the desktop
client is a separate package built on top of this one.
"""

from __future__ import annotations

from taskscheduler.version import __version__

__all__ = ["__version__"]
