"""Placeholder student chat.

Nothing is delivered anywhere. Sending only walks the status through
``idle -> sending -> sent -> idle`` on fixed delays, derived from elapsed time.
"""

import time
from typing import Callable

from portal.core import config

IDLE = 'idle'
SENDING = 'sending'
SENT = 'sent'


class ChatPlaceholder:
    def __init__(
        self,
        send_delay: float | None = None,
        sent_display: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._send_delay = config.CHAT_SEND_DELAY_SECONDS if send_delay is None else send_delay
        self._sent_display = config.CHAT_SENT_DISPLAY_SECONDS if sent_display is None else sent_display
        self._clock = clock
        self._started_at: float | None = None

    @property
    def status(self) -> str:
        if self._started_at is None:
            return IDLE

        elapsed = self._clock() - self._started_at
        if elapsed < self._send_delay:
            return SENDING
        if elapsed < self._send_delay + self._sent_display:
            return SENT

        self._started_at = None
        return IDLE

    def send(self, message: str) -> str:
        if not message.strip() or self.status == SENDING:
            return self.status
        self._started_at = self._clock()
        return SENDING

    def reset(self, _user=None) -> None:
        """Drop any message in flight, e.g. when the session changes hands."""
        self._started_at = None
