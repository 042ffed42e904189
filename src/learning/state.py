"""Session state enums and the completion record shared by the engine and the mode adapters."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict


class SessionStatus(str, Enum):
    ACTIVE = "active"
    REVEALED = "revealed"
    TERMINAL = "terminal"


class Outcome(str, Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    KNOWN = "known"
    LEARNING = "learning"
    READ = "read"


@dataclass(frozen=True)
class Reward:
    """What an adapter computes from a terminal session."""
    points: int
    score: int
    total: int
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Completion:
    """Emitted once per session when it reaches Terminal."""
    session_id: str
    mode: str
    activity_type: str
    topic: str
    points: int
    score: int
    total: int
    content_id: str | None = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
