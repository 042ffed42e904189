"""
Common utility functions used across multiple routes.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException

from quickstudy.models.models import User as DbUser


def iso_format(dt: datetime) -> str:
    """Format datetime as ISO string with Z suffix."""
    return dt.isoformat() + "Z"


def iso_date(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


def get_db_user(user_id: int, db: Session) -> DbUser:
    """Load the user row or fail with 401 (token outlived its user)."""
    u = db.query(DbUser).filter(DbUser.id == user_id).first()
    if not u:
        raise HTTPException(status_code=401, detail="User not found")
    return u


def display_name(user: DbUser) -> str:
    """Display name, falling back to the email prefix."""
    name = user.display_name
    if isinstance(name, str) and name.strip():
        return name.strip()
    return user.email.split("@", 1)[0]
