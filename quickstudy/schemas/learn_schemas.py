from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from learning.payloads import Mode


class StartSessionRequest(BaseModel):
    topic: str = Field(..., max_length=200)
    mode: Mode


class AnswerRequest(BaseModel):
    # int option index (quiz), "known"/"learning" (flashcards), free text or null (games)
    value: Any = None


class IndexRequest(BaseModel):
    index: int


class TimeoutRequest(BaseModel):
    index: int


class CompletionView(BaseModel):
    session_id: str
    mode: str
    activity_type: str
    topic: str
    points: int
    score: int
    total: int
    content_id: Optional[str] = None
    metadata: Dict[str, Any] = {}


class SessionView(BaseModel):
    session_id: str
    topic: str
    mode: str
    navigation: Literal["answer", "self_report", "free", "checklist"]
    status: Literal["active", "revealed", "terminal"]
    current_index: int
    total: int
    score: int
    streak: int
    outcomes: List[str]
    item: Optional[Dict[str, Any]] = None
    completion: Optional[CompletionView] = None


class TransitionResponse(BaseModel):
    applied: bool
    session: SessionView


class ResetResponse(BaseModel):
    message: str
