"""Feedback around Jira-backed service calls: progress banner and failure reporting."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

import streamlit as st

logger = logging.getLogger(__name__)

T = TypeVar("T")


def guarded_fetch(what: str, fetch: Callable[..., T], *args, **kwargs) -> T | None:
    """Run ``fetch``; if Jira fails, show the error on the page and return None.

    ``what`` names the data in the message ("release versions", "change
    requests"). Pages stop rendering the section when None comes back.
    """
    try:
        return fetch(*args, **kwargs)
    except Exception as exc:
        logger.exception("Jira request failed while loading %s", what)
        st.error(f"Failed to load {what} from Jira: {exc}")
        return None


class ProgressReporter:
    """Banner for multi-query loads such as epics followed by story batches.

    ``callback(message, current, total)`` is passed to DashboardService.
    Batch counts drive the bar; stages without a count leave it where it was.
    """

    def __init__(self, title: str):
        self._box = st.container()
        self._box.info(title)
        self._stage = self._box.empty()
        self._bar = self._box.progress(0.0)
        self._done = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._done:
            return
        if current is not None and total:
            self._stage.write(f"{message} ({current}/{total})")
            self._bar.progress(min(max(current / total, 0.0), 1.0))
        else:
            self._stage.write(message)

    def complete(self, message: str) -> None:
        if self._done:
            return
        self._bar.progress(1.0)
        self._box.success(message)
        self._done = True

    def error(self, message: str) -> None:
        if self._done:
            return
        self._box.error(message)
        self._done = True
