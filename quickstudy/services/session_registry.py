"""
In-memory learning sessions, one slot per learner.

A slot holds a generation ticket and, once content has arrived, the SessionEngine.
Starting a session or resetting discards whatever the slot held; a generation that
finishes with an outdated ticket is refused instead of overwriting newer state.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from learning.engine import SessionEngine
from learning.errors import NoActiveSession, StaleGeneration

logger = logging.getLogger("quickstudy.sessions")


@dataclass
class _Slot:
    ticket: int
    engine: Optional[SessionEngine] = None


class SessionRegistry:
    def __init__(self):
        self._slots: Dict[int, _Slot] = {}
        self._tickets = itertools.count(1)

    def begin(self, user_id: int) -> int:
        """Discard the learner's current session and issue a ticket for the next one."""
        ticket = next(self._tickets)
        previous = self._slots.get(user_id)
        if previous is not None and previous.engine is not None:
            logger.info("session discarded user=%s session=%s", user_id, previous.engine.id)
        self._slots[user_id] = _Slot(ticket=ticket)
        return ticket

    def install(self, user_id: int, ticket: int, engine: SessionEngine) -> None:
        slot = self._slots.get(user_id)
        if slot is None or slot.ticket != ticket:
            logger.info("stale generation dropped user=%s ticket=%s", user_id, ticket)
            raise StaleGeneration()
        slot.engine = engine

    def abandon(self, user_id: int, ticket: int) -> None:
        """Generation failed: return the learner to mode selection if nothing newer started."""
        slot = self._slots.get(user_id)
        if slot is not None and slot.ticket == ticket:
            del self._slots[user_id]

    def get(self, user_id: int) -> SessionEngine:
        slot = self._slots.get(user_id)
        if slot is None or slot.engine is None:
            raise NoActiveSession()
        return slot.engine

    def reset(self, user_id: int) -> bool:
        slot = self._slots.pop(user_id, None)
        return slot is not None

    def __len__(self) -> int:
        return len(self._slots)


_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    return _registry
