from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class ProfileResponse(BaseModel):
    id: int
    email: str
    display_name: str
    total_points: int
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=80)

    @field_validator("display_name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("display name must not be blank")
        return v


class ActivityItem(BaseModel):
    id: str
    activity_type: str
    points_earned: int
    topic_name: str
    metadata: Dict[str, Any] = {}
    created_at: str


class ActivityListResponse(BaseModel):
    activities: List[ActivityItem]


class RecentItem(BaseModel):
    id: str
    mode: str
    topic_name: str
    created_at: str
    completed: bool
    score: Optional[int] = None
    total: Optional[int] = None


class RecentListResponse(BaseModel):
    items: List[RecentItem]


class ContentRecordView(BaseModel):
    """Internal shape used by the recent-activity merge before serialisation."""
    id: str
    mode: str
    topic_name: str
    created_at: datetime
    completed: bool
    score: Optional[int] = None
    total: Optional[int] = None
