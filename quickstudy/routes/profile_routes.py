"""
Profile aggregate and activity history endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quickstudy.config import get_db
from quickstudy.models.models import LearningActivity
from quickstudy.schemas.profile_schemas import (
    ActivityItem,
    ActivityListResponse,
    ProfileResponse,
    RecentItem,
    RecentListResponse,
    UpdateProfileRequest,
)
from quickstudy.schemas.user_schemas import User
from quickstudy.services.content_store import recent_content
from quickstudy.utils.auth import get_current_user
from quickstudy.utils.common import display_name, get_db_user, iso_date, iso_format

profile_routes = APIRouter()


def _profile(user) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        email=user.email,
        display_name=display_name(user),
        total_points=user.total_points or 0,
        current_streak=user.current_streak or 0,
        longest_streak=user.longest_streak or 0,
        last_activity_date=iso_date(user.last_activity_date),
    )


@profile_routes.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Points, current and longest day streak, last activity date."""
    return _profile(get_db_user(current_user.id, db))


@profile_routes.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Only the display name is editable; points and streak change through completed sessions."""
    user = get_db_user(current_user.id, db)
    user.display_name = body.display_name
    db.add(user)
    db.commit()
    db.refresh(user)
    return _profile(user)


@profile_routes.get("/activities", response_model=ActivityListResponse)
async def list_activities(
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ActivityListResponse:
    rows = (
        db.query(LearningActivity)
        .filter(LearningActivity.user_id == current_user.id)
        .order_by(LearningActivity.created_at.desc())
        .limit(limit)
        .all()
    )
    return ActivityListResponse(
        activities=[
            ActivityItem(
                id=a.id,
                activity_type=a.activity_type,
                points_earned=a.points_earned,
                topic_name=a.topic_name,
                metadata=a.activity_metadata or {},
                created_at=iso_format(a.created_at),
            )
            for a in rows
        ]
    )


@profile_routes.get("/activities/recent", response_model=RecentListResponse)
async def recent_activities(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RecentListResponse:
    """Latest generated sessions across every mode, newest first."""
    records = recent_content(db, current_user.id)
    return RecentListResponse(
        items=[
            RecentItem(**r.model_dump(exclude={"created_at"}), created_at=iso_format(r.created_at))
            for r in records
        ]
    )
