# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""External cancellation and overall wall-clock deadline for verification runs."""

from __future__ import annotations

import threading
import time


class CancellationToken:
    """
    Thread-safe cancel flag with an optional deadline.

    One token may be shared by several concurrent runs to stop all of them.
    """

    def __init__(self, deadline: float | None = None):
        self._event = threading.Event()
        self._deadline_at = time.monotonic() + deadline if deadline is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline_at is not None and time.monotonic() >= self._deadline_at:
            self._event.set()
            return True
        return False

    def remaining(self) -> float | None:
        """Seconds until the deadline, ``None`` without one."""
        if self._deadline_at is None:
            return None
        return max(0.0, self._deadline_at - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; returns True if cancelled before or during the wait."""
        if self.cancelled:
            return True
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            # The deadline falls inside this wait.
            self._event.wait(remaining)
            self._event.set()
            return True
        return self._event.wait(max(0.0, seconds))
