# src/formflow/core/notices.py
"""Transient notices shown after a rejected edit.

A notice lives for a fixed number of seconds on a monotonic clock. The clock
is any zero-argument callable returning seconds, ``time.monotonic`` unless a
test supplies its own.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

type Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class Notice:
    text: str
    expires_at: float


class NoticeBoard:
    """Holds at most one notice; posting replaces whatever is showing."""

    def __init__(self, dismiss_after: float, clock: Clock = time.monotonic) -> None:
        self._dismiss_after = dismiss_after
        self._clock = clock
        self._notice: Notice | None = None

    def post(self, text: str) -> Notice:
        self._notice = Notice(text=text, expires_at=self._clock() + self._dismiss_after)
        return self._notice

    @property
    def current(self) -> str | None:
        """Text of the showing notice, or None once it has expired."""
        if self._notice is not None and self._clock() >= self._notice.expires_at:
            self._notice = None
        return self._notice.text if self._notice is not None else None

    def dismiss(self) -> None:
        self._notice = None
