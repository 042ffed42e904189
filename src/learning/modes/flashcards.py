from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from learning.errors import InvalidAnswer
from learning.modes.base import ModeAdapter, Navigation
from learning.payloads import Card, Mode
from learning.rewards import FLASHCARDS_POINTS
from learning.state import Outcome, Reward

if TYPE_CHECKING:
    from learning.engine import SessionEngine

SELF_REPORTS = {"known": Outcome.KNOWN, "learning": Outcome.LEARNING}


class FlashcardsAdapter(ModeAdapter):
    """
    Self-reported review. The learner marks each card known or still learning;
    flipping only changes which side is shown.
    """

    mode = Mode.FLASHCARDS
    activity_type = "flashcards_reviewed"
    navigation = Navigation.SELF_REPORT

    @property
    def flippable(self) -> bool:
        return True

    def evaluate(self, item: Card, value: Any) -> Outcome:
        outcome = SELF_REPORTS.get(value) if isinstance(value, str) else None
        if outcome is None:
            raise InvalidAnswer("Flashcards are marked 'known' or 'learning'")
        return outcome

    def score_delta(self, engine: "SessionEngine", outcome: Outcome, time_left: Optional[int]) -> int:
        return 1 if outcome is Outcome.KNOWN else 0

    def can_advance_from_active(self, engine: "SessionEngine") -> bool:
        return engine.flipped

    def reward(self, engine: "SessionEngine") -> Reward:
        known = engine.count(Outcome.KNOWN)
        return Reward(
            points=FLASHCARDS_POINTS,
            score=known,
            total=engine.total,
            metadata={"known": known, "learning": engine.count(Outcome.LEARNING)},
        )

    def render(self, engine: "SessionEngine") -> Dict[str, Any]:
        card: Card = engine.current_item
        return {
            "side": "back" if engine.flipped else "front",
            "text": card.back if engine.flipped else card.front,
            "flipped": engine.flipped,
            "mark": engine.outcome(engine.current_index).value,
        }
