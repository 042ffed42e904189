"""
Generic learning-session state machine.

Active -> Revealed -> Active (next item) ... -> Terminal. Terminal is absorbing.
Every transition method returns True when applied and False when it is not legal
in the current state; illegal calls never change anything.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Optional, Sequence
from uuid import uuid4

from learning.countdown import Countdown
from learning.errors import MalformedContent
from learning.modes import get_adapter
from learning.modes.base import ModeAdapter
from learning.payloads import ContentPayload, Mode
from learning.state import Completion, Outcome, SessionStatus

logger = logging.getLogger(__name__)


class SessionEngine:
    def __init__(
        self,
        topic: str,
        adapter: ModeAdapter,
        items: Sequence[Any],
        *,
        extras: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
        content_id: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        on_complete: Optional[Callable[[Completion], None]] = None,
    ):
        if not items:
            raise MalformedContent("Generated content contained no items")
        self.id = session_id or str(uuid4())
        self.topic = topic
        self.adapter = adapter
        self.items: tuple = tuple(items)
        self.extras: Dict[str, Any] = dict(extras or {})
        self.content_id = content_id
        self.rng = rng or random.Random()

        self.current_index = 0
        self.status = SessionStatus.ACTIVE
        self.outcomes: Dict[int, Outcome] = {}
        self.answers: Dict[int, Any] = {}
        self.points_by_item: Dict[int, int] = {}
        self.score = 0
        self.streak = 0
        self.max_streak = 0
        self.flipped = False
        self.expanded: set[int] = set()
        self.countdown: Optional[Countdown] = Countdown(clock=clock) if adapter.timed else None

        self._completion: Optional[Completion] = None
        self._claimed = False
        self._on_complete = on_complete

        self._enter(0)

    @classmethod
    def from_payload(cls, topic: str, payload: ContentPayload, **kwargs) -> "SessionEngine":
        adapter = kwargs.pop("adapter", None) or get_adapter(payload.mode)
        return cls(topic, adapter, payload.items(), extras=adapter.extras(payload), **kwargs)

    #-----Read-only views-----

    @property
    def mode(self) -> Mode:
        return self.adapter.mode

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def is_terminal(self) -> bool:
        return self.status is SessionStatus.TERMINAL

    @property
    def current_item(self) -> Any:
        if self.is_terminal:
            return None
        return self.items[self.current_index]

    @property
    def completion(self) -> Optional[Completion]:
        return self._completion

    @property
    def time_left(self) -> Optional[int]:
        if self.countdown is None:
            return None
        return self.countdown.remaining()

    def outcome(self, index: int) -> Outcome:
        return self.outcomes.get(index, Outcome.UNANSWERED)

    def count(self, outcome: Outcome) -> int:
        return sum(1 for o in self.outcomes.values() if o is outcome)

    #-----Transitions-----

    def submit_answer(self, value: Any) -> bool:
        if self.status is not SessionStatus.ACTIVE or not self.adapter.accepts_answers:
            return False
        time_left = None
        if self.countdown is not None:
            time_left = self.countdown.remaining()
            if time_left == 0:
                # Answer arrived after the item expired.
                value = None
        outcome = self.adapter.evaluate(self.current_item, value)
        self._reveal(outcome, value, time_left)
        return True

    def expire(self, index: int) -> bool:
        """Countdown ran out for item `index`. Ignored unless that item is the live one."""
        if self.status is not SessionStatus.ACTIVE or self.countdown is None:
            return False
        if index != self.current_index or not self.countdown.is_armed_for(index):
            logger.debug("stale timeout ignored session=%s index=%s current=%s", self.id, index, self.current_index)
            return False
        self._reveal(Outcome.INCORRECT, None, 0)
        return True

    def advance(self) -> bool:
        if self.status is SessionStatus.TERMINAL:
            return False
        if self.status is SessionStatus.ACTIVE and not self.adapter.can_advance_from_active(self):
            return False
        index = self.current_index
        if index + 1 >= self.total:
            if not self.adapter.can_finish(self):
                return False
            self.adapter.on_leave(self, index)
            self._terminate()
            return True
        self.adapter.on_leave(self, index)
        self._enter(index + 1)
        return True

    def back(self) -> bool:
        if self.status is not SessionStatus.ACTIVE or not self.adapter.allows_back:
            return False
        if self.current_index == 0:
            return False
        self._enter(self.current_index - 1)
        return True

    def jump(self, index: int) -> bool:
        self._check_index(index)
        if self.status is not SessionStatus.ACTIVE or not self.adapter.allows_jump:
            return False
        if index == self.current_index:
            return False
        self._enter(index)
        return True

    def flip(self) -> bool:
        if self.status is SessionStatus.TERMINAL or not self.adapter.flippable:
            return False
        self.flipped = not self.flipped
        return True

    def expand(self, index: int) -> bool:
        self._check_index(index)
        if self.status is not SessionStatus.ACTIVE or not self.adapter.expandable:
            return False
        if index in self.expanded:
            return False
        self.expanded.add(index)
        # Read status is sticky: set on first expand, never cleared.
        self.outcomes.setdefault(index, Outcome.READ)
        return True

    def collapse(self, index: int) -> bool:
        self._check_index(index)
        if self.status is not SessionStatus.ACTIVE or index not in self.expanded:
            return False
        self.expanded.discard(index)
        return True

    def complete(self) -> bool:
        """Finish from any item, for modes whose completion is an eligibility gate."""
        if self.status is not SessionStatus.ACTIVE or not self.adapter.allows_early_finish:
            return False
        if not self.adapter.can_finish(self):
            return False
        self._terminate()
        return True

    def claim_completion(self) -> Optional[Completion]:
        """Hand out the completion exactly once."""
        if self._completion is None or self._claimed:
            return None
        self._claimed = True
        return self._completion

    #-----Internals-----

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.total:
            raise IndexError(f"item index {index} out of range 0..{self.total - 1}")

    def _enter(self, index: int) -> None:
        self.current_index = index
        self.status = SessionStatus.ACTIVE
        self.flipped = False
        self.adapter.on_enter(self, index)
        if self.countdown is not None:
            self.countdown.arm(index)

    def _reveal(self, outcome: Outcome, value: Any, time_left: Optional[int]) -> None:
        index = self.current_index
        points = self.adapter.score_delta(self, outcome, time_left)
        self.outcomes[index] = outcome
        self.answers[index] = value
        self.points_by_item[index] = points
        self.score += points
        if self.adapter.tracks_streak:
            if outcome is Outcome.CORRECT:
                self.streak += 1
                self.max_streak = max(self.max_streak, self.streak)
            else:
                self.streak = 0
        if self.countdown is not None:
            self.countdown.disarm()
        self.status = SessionStatus.REVEALED

    def _terminate(self) -> None:
        if self.countdown is not None:
            self.countdown.disarm()
        self.status = SessionStatus.TERMINAL
        self.current_index = self.total
        self.expanded.clear()
        reward = self.adapter.reward(self)
        self._completion = Completion(
            session_id=self.id,
            mode=self.mode.value,
            activity_type=self.adapter.activity_type,
            topic=self.topic,
            points=reward.points,
            score=reward.score,
            total=reward.total,
            content_id=self.content_id,
            metadata={"topic": self.topic, **reward.metadata},
        )
        logger.info(
            "session complete session=%s mode=%s points=%s score=%s/%s",
            self.id, self.mode.value, reward.points, reward.score, reward.total,
        )
        if self._on_complete is not None:
            self._on_complete(self._completion)

    #-----Serialization-----

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": self.id,
            "topic": self.topic,
            "mode": self.mode.value,
            "navigation": self.adapter.navigation.value,
            "status": self.status.value,
            "current_index": self.current_index,
            "total": self.total,
            "score": self.score,
            "streak": self.streak,
            "outcomes": [self.outcome(i).value for i in range(self.total)],
            "item": None if self.is_terminal else self.adapter.render(self),
            "completion": self._completion.to_dict() if self._completion else None,
        }
