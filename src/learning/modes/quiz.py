from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from learning.errors import InvalidAnswer
from learning.modes.base import ModeAdapter, Navigation
from learning.payloads import Mode, Question
from learning.rewards import quiz_points
from learning.state import Outcome, Reward, SessionStatus

if TYPE_CHECKING:
    from learning.engine import SessionEngine


class QuizAdapter(ModeAdapter):
    """Four-option multiple choice. One locked answer per question, no partial credit."""

    mode = Mode.QUIZ
    activity_type = "quiz_completed"
    navigation = Navigation.ANSWER

    def evaluate(self, item: Question, value: Any) -> Outcome:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < len(item.options):
            raise InvalidAnswer(f"Quiz answers are an option index 0..{len(item.options) - 1}")
        return Outcome.CORRECT if value == item.correct_index else Outcome.INCORRECT

    def score_delta(self, engine: "SessionEngine", outcome: Outcome, time_left: Optional[int]) -> int:
        return 1 if outcome is Outcome.CORRECT else 0

    def reward(self, engine: "SessionEngine") -> Reward:
        correct = engine.count(Outcome.CORRECT)
        return Reward(
            points=quiz_points(correct, engine.total),
            score=correct,
            total=engine.total,
            metadata={"correct": correct, "incorrect": engine.count(Outcome.INCORRECT)},
        )

    def render(self, engine: "SessionEngine") -> Dict[str, Any]:
        question: Question = engine.current_item
        view: Dict[str, Any] = {
            "question": question.text,
            "options": list(question.options),
        }
        if engine.status is SessionStatus.REVEALED:
            selected = engine.answers.get(engine.current_index)
            view["selected_index"] = selected
            view["correct_index"] = question.correct_index
            view["explanation"] = question.explanation
            view["is_correct"] = engine.outcome(engine.current_index) is Outcome.CORRECT
            view["markers"] = [
                "correct" if i == question.correct_index
                else "incorrect" if i == selected
                else None
                for i in range(len(question.options))
            ]
        return view
