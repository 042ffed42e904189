from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from quickstudy.config import get_db
from quickstudy.schemas.auth_schemas import LoginRequest, LoginResponse, LogoutResponse, RegisterRequest, RegisterResponse
from quickstudy.schemas.user_schemas import User
from quickstudy.utils.auth import (
    authenticate_user,
    clear_auth_cookie,
    create_user,
    get_current_user,
    get_user_by_email,
    set_auth_cookie,
)
from quickstudy.utils.logger import configure_logging

logger = configure_logging()

auth_routes = APIRouter()


@auth_routes.post("/login")
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)) -> LoginResponse:
    """Authenticate user and set HTTP-only cookie with token."""
    user = authenticate_user(request.email.strip().lower(), request.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    set_auth_cookie(response, user)
    return LoginResponse(message="Login successful", token_set=True)


@auth_routes.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, response: Response, db: Session = Depends(get_db)) -> RegisterResponse:
    """Register a new user with an empty profile (0 points, no streak)."""
    email = request.email.strip().lower()
    if get_user_by_email(email, db):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    if request.password != request.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match"
        )

    user = create_user(email, request.password, db, display_name=request.display_name)
    logger.info("user registered user=%s", user.id)
    set_auth_cookie(response, user)
    return RegisterResponse(message="Registration successful")


@auth_routes.post("/logout")
def logout(response: Response) -> LogoutResponse:
    """Clear the authentication cookie."""
    clear_auth_cookie(response)
    return LogoutResponse(message="Logout successful")


@auth_routes.get("/me")
def get_current_user_info(current_user: User = Depends(get_current_user)) -> User:
    return current_user
