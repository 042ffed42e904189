from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, cast

from learning.modes.base import ModeAdapter, Navigation
from learning.payloads import BriefContent, ContentPayload, Mode
from learning.rewards import BRIEF_POINTS
from learning.state import Outcome, Reward

if TYPE_CHECKING:
    from learning.engine import SessionEngine


def headline(point: str) -> str:
    return point.split(".")[0]


class BriefAdapter(ModeAdapter):
    """
    Summary with expandable key points. A point is read the first time it is expanded.
    Completion is an eligibility gate: every key point must have been read.
    """

    mode = Mode.BRIEF
    activity_type = "brief_completed"
    navigation = Navigation.CHECKLIST

    def extras(self, payload: ContentPayload) -> Dict[str, Any]:
        brief = cast(BriefContent, payload)
        return {
            "title": brief.title,
            "summary": brief.summary,
            "fun_fact": brief.fun_fact,
            "difficulty": brief.difficulty,
        }

    def can_advance_from_active(self, engine: "SessionEngine") -> bool:
        return engine.outcome(engine.current_index) is Outcome.READ

    def can_finish(self, engine: "SessionEngine") -> bool:
        return engine.count(Outcome.READ) == engine.total

    def reward(self, engine: "SessionEngine") -> Reward:
        return Reward(
            points=BRIEF_POINTS,
            score=engine.count(Outcome.READ),
            total=engine.total,
            metadata={"key_points": engine.total, "difficulty": engine.extras.get("difficulty")},
        )

    def render(self, engine: "SessionEngine") -> Dict[str, Any]:
        read = engine.count(Outcome.READ)
        return {
            **engine.extras,
            "key_points": [
                {
                    "index": i,
                    "headline": headline(point),
                    "text": point if i in engine.expanded else None,
                    "expanded": i in engine.expanded,
                    "read": engine.outcome(i) is Outcome.READ,
                }
                for i, point in enumerate(engine.items)
            ],
            "read_count": read,
            "can_complete": read == engine.total,
        }
