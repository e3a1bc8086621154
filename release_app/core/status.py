"""Status categorisation helpers shared by the portfolio and dependency views."""

from __future__ import annotations

from .config import COMPLETED_STORY_STATUSES, DEPENDENCY_DONE_MARKERS


def is_story_completed(status: str | None) -> bool:
    """Check whether a delivery story's points count as delivered.

    Examples
    --------
    >>> is_story_completed("Partial Release")
    True
    >>> is_story_completed("In Progress")
    False
    """
    if not status:
        return False
    return str(status).strip().lower() in COMPLETED_STORY_STATUSES


def is_dependency_story_done(status: str | None) -> bool:
    """Looser check used for other teams' stories, whose workflows vary."""
    if not status:
        return False
    text = str(status).lower()
    return any(marker in text for marker in DEPENDENCY_DONE_MARKERS)
