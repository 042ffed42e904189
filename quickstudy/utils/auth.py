from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from learning.context import LearnerContext
from quickstudy.config import get_db, settings
from quickstudy.models.models import User as DbUser
from quickstudy.schemas.auth_schemas import AuthTokenPayload
from quickstudy.schemas.user_schemas import User
from quickstudy.utils.jwt import create_access_token, get_password_hash, verify_password, verify_token


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User:
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )

    payload = verify_token(access_token)
    user = get_user_by_email(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return User(id=user.id, email=user.email, display_name=user.display_name)


def get_learner_context(
    access_token: Optional[str] = Cookie(None),
    current_user: User = Depends(get_current_user),
) -> LearnerContext:
    """Explicit learner context for content generation and activity recording."""
    return LearnerContext(user_id=current_user.id, email=current_user.email, access_token=access_token)


def set_auth_cookie(response: Response, user: DbUser) -> None:
    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    token = create_access_token(
        AuthTokenPayload(
            sub=user.email,
            exp=datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
    )
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=max_age,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )


def get_user_by_email(email: str, db: Session) -> DbUser | None:
    return db.query(DbUser).filter(DbUser.email == email).first()


def create_user(email: str, password: str, db: Session, display_name: Optional[str] = None) -> DbUser:
    user = DbUser(
        email=email,
        hashed_password=get_password_hash(password),
        display_name=display_name or email.split("@", 1)[0],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(email: str, password: str, db: Session) -> DbUser | None:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
