"""Process-wide cooldown gate for playback and volume commands."""

from __future__ import annotations

import time
from typing import Callable

from .const import COOLDOWN_WINDOW


class CooldownGate:
    """Suppress playback/volume commands for a fixed window after playback.

    One gate is shared by every device: a playback command on one device
    blocks volume changes on all of them until the window expires.
    """

    def __init__(
        self,
        window: float = COOLDOWN_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = window
        self._clock = clock
        self._last_fired: float | None = None

    @property
    def window(self) -> float:
        return self._window

    def is_blocked(self) -> bool:
        """Return True while inside the window of the last fired command."""
        return self.remaining() > 0

    def remaining(self) -> float:
        """Seconds left in the current window (0 when not blocked)."""
        if self._last_fired is None:
            return 0.0
        return max(0.0, self._window - (self._clock() - self._last_fired))

    def mark_fired(self) -> None:
        """Start a new window now."""
        self._last_fired = self._clock()

    def reset(self) -> None:
        self._last_fired = None
