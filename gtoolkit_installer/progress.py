"""Presentation constants for pipeline step announcements."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StepIcons:
    """Icons prefixed to step announcements."""

    downloading: str = "📥 "
    extracting: str = "📦 "
    moving: str = "🚚 "
    creating: str = "📝 "
    building: str = "🏗️  "
    checking: str = "🔍 "
    sparkle: str = "✨ "


STEP_ICONS = StepIcons()
PLAIN_ICONS = StepIcons(
    downloading="",
    extracting="",
    moving="",
    creating="",
    building="",
    checking="",
    sparkle="",
)


def human_duration(seconds: float) -> str:
    """Format a duration in seconds as the largest whole unit.

    Mirrors how build tools usually report elapsed time: ``"42 seconds"``,
    ``"3 minutes"``, ``"1 hour"``.
    """
    seconds = max(0.0, seconds)
    units = (("day", 86400), ("hour", 3600), ("minute", 60), ("second", 1))
    for name, size in units:
        if seconds >= size:
            count = int(seconds // size)
            return f"{count} {name}" + ("" if count == 1 else "s")
    return f"{seconds:.1f} seconds"


__all__ = ["PLAIN_ICONS", "STEP_ICONS", "StepIcons", "human_duration"]
