"""Transient, self-clearing status messages."""

import asyncio
from typing import Callable, Optional

StatusCallback = Callable[[str], None]


class StatusNotifier:
    """Holds one status message and clears it after a delay.

    Each notify() cancels the previous pending clear, so only the latest
    message's timer is ever live. Timers run on the running asyncio loop;
    called outside one, the message is set but never expires by itself.
    """

    def __init__(self, default_duration_ms: int = 2000, on_change: Optional[StatusCallback] = None):
        self.default_duration_ms = default_duration_ms
        self.on_change = on_change
        self.message = ""
        self._timer: Optional[asyncio.TimerHandle] = None

    def notify(self, message: str, duration_ms: Optional[int] = None) -> None:
        self._cancel_timer()
        self._set(message)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to expire on; the message stays until the next notify or clear
            return

        delay = (duration_ms if duration_ms is not None else self.default_duration_ms) / 1000
        self._timer = loop.call_later(delay, self._expire)

    def clear(self) -> None:
        self._cancel_timer()
        self._set("")

    def close(self) -> None:
        self._cancel_timer()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _expire(self) -> None:
        self._timer = None
        self._set("")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set(self, message: str) -> None:
        self.message = message
        if self.on_change:
            self.on_change(message)
