from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any, Dict, Optional

from learning.errors import InvalidAnswer
from learning.modes.base import ModeAdapter, Navigation
from learning.payloads import Challenge, Mode
from learning.rewards import game_accuracy, game_item_points
from learning.state import Outcome, Reward, SessionStatus

if TYPE_CHECKING:
    from learning.engine import SessionEngine

CHALLENGE_LABELS = {
    "fill_blank": "Fill in the Blank",
    "true_false": "True or False",
    "word_scramble": "Word Scramble",
    "speed_match": "Speed Match",
}


def normalize(text: str) -> str:
    return text.strip().lower()


def scramble(word: str, rng: random.Random) -> str:
    """Display permutation of the answer. May equal the answer itself; never re-rolled."""
    return "".join(rng.sample(word, len(word)))


def is_correct(challenge: Challenge, value: Optional[str]) -> bool:
    if value is None:
        return False
    given = normalize(value)
    if challenge.options:
        # Multiple choice: the pick must be one of the offered options.
        if given not in {normalize(o) for o in challenge.options}:
            return False
    return given == normalize(challenge.answer)


class GameAdapter(ModeAdapter):
    """
    Timed challenges. Correct answers score 10 + time bonus + capped streak bonus;
    a wrong answer or a timeout scores nothing and resets the streak.
    """

    mode = Mode.GAME
    activity_type = "game_completed"
    navigation = Navigation.ANSWER
    timed = True
    tracks_streak = True

    def evaluate(self, item: Challenge, value: Any) -> Outcome:
        if value is not None and not isinstance(value, str):
            raise InvalidAnswer("Game answers are text")
        return Outcome.CORRECT if is_correct(item, value) else Outcome.INCORRECT

    def score_delta(self, engine: "SessionEngine", outcome: Outcome, time_left: Optional[int]) -> int:
        if outcome is not Outcome.CORRECT:
            return 0
        return game_item_points(time_left or 0, engine.streak)

    def reward(self, engine: "SessionEngine") -> Reward:
        return Reward(
            points=engine.score,
            score=engine.score,
            total=engine.total,
            metadata={
                "correct": engine.count(Outcome.CORRECT),
                "max_streak": engine.max_streak,
                "accuracy": game_accuracy(engine.score, engine.total),
            },
        )

    def render(self, engine: "SessionEngine") -> Dict[str, Any]:
        challenge: Challenge = engine.current_item
        revealed = engine.status is SessionStatus.REVEALED
        view: Dict[str, Any] = {
            "type": challenge.type,
            "label": CHALLENGE_LABELS[challenge.type],
            "question": challenge.question,
            "options": ["true", "false"] if challenge.type == "true_false" else challenge.options,
            "time_left": None if revealed else engine.time_left,
        }
        if not revealed:
            view["hint"] = challenge.hint
            if challenge.type == "word_scramble":
                view["scrambled"] = scramble(challenge.answer, engine.rng)
        else:
            index = engine.current_index
            correct = engine.outcome(index) is Outcome.CORRECT
            view["answer"] = challenge.answer
            view["given"] = engine.answers.get(index)
            view["is_correct"] = correct
            view["message"] = "Correct!" if correct else "Not quite"
            view["points"] = engine.points_by_item.get(index, 0)
        return view
