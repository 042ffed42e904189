from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from learning.payloads import ContentPayload, Mode
from learning.state import Outcome, Reward

if TYPE_CHECKING:
    from learning.engine import SessionEngine


class Navigation(str, Enum):
    ANSWER = "answer"            # advance only after an answer is revealed
    SELF_REPORT = "self_report"  # learner marks known/learning; flip unlocks advance
    FREE = "free"                # forward/back/jump; advance marks the item read
    CHECKLIST = "checklist"      # items are expanded independently; finish is gated on all read


class ModeAdapter(ABC):
    """
    Strategy object that specializes the generic SessionEngine for one learning mode.
    Defines the correctness predicate, per-item scoring, navigation rules, reward and rendering.
    """

    mode: Mode
    activity_type: str
    navigation: Navigation
    timed: bool = False
    tracks_streak: bool = False

    #-----Content-----

    def extras(self, payload: ContentPayload) -> Dict[str, Any]:
        """Payload fields that are not items but are shown alongside them."""
        return {}

    #-----Answering-----

    @property
    def accepts_answers(self) -> bool:
        return self.navigation in (Navigation.ANSWER, Navigation.SELF_REPORT)

    def evaluate(self, item: Any, value: Any) -> Outcome:
        """Correctness predicate for `value` against `item`."""
        raise NotImplementedError(f"{self.mode.value} items are not answered")

    def score_delta(self, engine: "SessionEngine", outcome: Outcome, time_left: Optional[int]) -> int:
        return 0

    #-----Navigation-----

    @property
    def allows_back(self) -> bool:
        return self.navigation == Navigation.FREE

    @property
    def allows_jump(self) -> bool:
        return self.navigation == Navigation.FREE

    @property
    def flippable(self) -> bool:
        return False

    @property
    def expandable(self) -> bool:
        return self.navigation == Navigation.CHECKLIST

    @property
    def allows_early_finish(self) -> bool:
        return self.navigation == Navigation.CHECKLIST

    def can_advance_from_active(self, engine: "SessionEngine") -> bool:
        return False

    def can_finish(self, engine: "SessionEngine") -> bool:
        """Eligibility gate for entering Terminal."""
        return True

    def on_enter(self, engine: "SessionEngine", index: int) -> None:
        pass

    def on_leave(self, engine: "SessionEngine", index: int) -> None:
        pass

    #-----Results-----

    @abstractmethod
    def reward(self, engine: "SessionEngine") -> Reward:
        """Deterministic reward over the terminal session state."""

    @abstractmethod
    def render(self, engine: "SessionEngine") -> Dict[str, Any]:
        """Display data for the current item (and any mode-wide content)."""
