"""
Content payload models, one per learning mode.

Each payload is validated strictly from the content service's JSON: exact types,
exact arity, no coercion. Anything that fails becomes MalformedContent.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from learning.errors import MalformedContent


class Mode(str, Enum):
    """Learning modes. Values are the wire names used by the content service."""
    QUIZ = "quiz"
    FLASHCARDS = "flashcards"
    COMIC = "comic"
    BRIEF = "brief"
    GAME = "games"


class _Strict(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)


class Question(_Strict):
    text: str = Field(alias="question")
    options: List[str] = Field(min_length=4, max_length=4)
    correct_index: int = Field(alias="correctIndex", ge=0, le=3)
    explanation: str

    @field_validator("options")
    @classmethod
    def _distinct_options(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("quiz options must be distinct")
        return v


class Card(_Strict):
    front: str
    back: str


class Panel(_Strict):
    title: str
    content: str
    character: Literal["professor", "student", "narrator"]
    emotion: str


class Challenge(_Strict):
    type: Literal["fill_blank", "true_false", "word_scramble", "speed_match"]
    question: str
    answer: str = Field(min_length=1)
    options: Optional[List[str]] = None
    hint: Optional[str] = None


class ContentPayload(_Strict):
    """Base for mode payloads. `items()` is the ordered sequence the session walks through."""

    mode: ClassVar[Mode]

    def items(self) -> list:
        raise NotImplementedError


class QuizContent(ContentPayload):
    mode: ClassVar[Mode] = Mode.QUIZ
    questions: List[Question] = Field(min_length=1)

    def items(self) -> list:
        return list(self.questions)


class FlashcardsContent(ContentPayload):
    mode: ClassVar[Mode] = Mode.FLASHCARDS
    cards: List[Card] = Field(min_length=1)

    def items(self) -> list:
        return list(self.cards)


class ComicContent(ContentPayload):
    mode: ClassVar[Mode] = Mode.COMIC
    panels: List[Panel] = Field(min_length=1)

    def items(self) -> list:
        return list(self.panels)


class BriefContent(ContentPayload):
    mode: ClassVar[Mode] = Mode.BRIEF
    title: str
    summary: str
    key_points: List[str] = Field(alias="keyPoints", min_length=1)
    fun_fact: str = Field(alias="funFact")
    difficulty: Literal["beginner", "intermediate", "advanced"]

    def items(self) -> list:
        return list(self.key_points)


class GameContent(ContentPayload):
    mode: ClassVar[Mode] = Mode.GAME
    games: List[Challenge] = Field(min_length=1)

    def items(self) -> list:
        return list(self.games)


PAYLOAD_TYPES: dict[Mode, type[ContentPayload]] = {
    Mode.QUIZ: QuizContent,
    Mode.FLASHCARDS: FlashcardsContent,
    Mode.COMIC: ComicContent,
    Mode.BRIEF: BriefContent,
    Mode.GAME: GameContent,
}


def parse_payload(mode: Mode, raw: Any) -> ContentPayload:
    """Validate raw service JSON into the payload for `mode`. Raises MalformedContent."""
    if not isinstance(raw, dict):
        raise MalformedContent(f"Expected a JSON object for {mode.value} content, got {type(raw).__name__}")
    try:
        return PAYLOAD_TYPES[mode].model_validate(raw)
    except SchemaError as e:
        errors = [
            {"loc": ".".join(str(p) for p in err.get("loc", ())), "msg": err.get("msg", "")}
            for err in e.errors()
        ]
        raise MalformedContent(f"Generated {mode.value} content failed validation", errors=errors) from e
