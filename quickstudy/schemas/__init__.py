"""
API schemas package. Import from submodules or from this package.

Example:
    from quickstudy.schemas import SessionView, StartSessionRequest
    from quickstudy.schemas.learn_schemas import SessionView
"""

from quickstudy.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from quickstudy.schemas.learn_schemas import (
    AnswerRequest,
    IndexRequest,
    ResetResponse,
    SessionView,
    StartSessionRequest,
    TimeoutRequest,
    TransitionResponse,
)
from quickstudy.schemas.profile_schemas import (
    ActivityItem,
    ActivityListResponse,
    ProfileResponse,
    RecentItem,
    RecentListResponse,
    UpdateProfileRequest,
)
from quickstudy.schemas.user_schemas import User
