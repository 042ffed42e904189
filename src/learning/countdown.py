"""Per-item countdown for timed game sessions."""

from __future__ import annotations

import math
import time
from typing import Callable, Optional

GAME_ITEM_SECONDS = 15


class Countdown:
    """
    Cooperative timer bound to one item index.

    The timer only answers for the index it was armed with; once disarmed or
    re-armed for another item, lookups for the old index report nothing.
    """

    def __init__(self, duration: int = GAME_ITEM_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.duration = duration
        self._clock = clock
        self._armed_for: Optional[int] = None
        self._started_at = 0.0

    @property
    def armed_for(self) -> Optional[int]:
        return self._armed_for

    def arm(self, index: int) -> None:
        self._armed_for = index
        self._started_at = self._clock()

    def disarm(self) -> None:
        self._armed_for = None

    def is_armed_for(self, index: int) -> bool:
        return self._armed_for is not None and self._armed_for == index

    def remaining(self) -> int:
        """Whole time units left; counts down like a once-per-second ticker."""
        if self._armed_for is None:
            return 0
        elapsed = max(self._clock() - self._started_at, 0.0)
        return max(self.duration - math.floor(elapsed), 0)

    def expired(self) -> bool:
        return self._armed_for is not None and self.remaining() == 0
