from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LearnerContext:
    """Who is learning. Passed explicitly to content generation and activity recording."""
    user_id: int
    email: str
    access_token: Optional[str] = None
