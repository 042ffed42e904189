"""
Integration test fixtures. Overrides get_db, the background session factory, the
content client and the session registry for API tests with an in-memory DB.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from learning.client import ContentGenerationClient, ContentService, ContentServiceError


class StubContentService(ContentService):
    """Serves canned raw payloads per mode; `error` makes every call fail."""

    def __init__(self, replies):
        self.replies = replies
        self.error = None
        self.calls = []
        self.before_reply = None

    async def fetch(self, context, topic, mode):
        self.calls.append((topic, mode))
        if self.before_reply is not None:
            self.before_reply()
        if self.error is not None:
            raise self.error
        return self.replies[mode]


@pytest.fixture
def session_factory():
    """Create in-memory engine and session factory for API tests."""
    import quickstudy.models  # noqa: F401
    from quickstudy.config import Base
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def content_service(raw_by_mode):
    return StubContentService(raw_by_mode)


@pytest.fixture
def session_registry():
    from quickstudy.services.session_registry import SessionRegistry
    return SessionRegistry()


@pytest.fixture
def api_client(override_get_db, session_factory, content_service, session_registry):
    """FastAPI TestClient with in-memory DB, stub content service and a fresh session registry."""
    from fastapi.testclient import TestClient
    from quickstudy.api import app
    from quickstudy.bootstrap import get_content_client
    from quickstudy.config import get_db, get_session_factory
    from quickstudy.services.session_registry import get_session_registry

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_content_client] = lambda: ContentGenerationClient(content_service)
    app.dependency_overrides[get_session_registry] = lambda: session_registry
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(api_client):
    """API client logged in as a freshly registered learner."""
    response = api_client.post(
        "/auth/register",
        json={
            "email": "learner@example.com",
            "password": "testpass123",
            "confirm_password": "testpass123",
            "display_name": "Learner",
        },
    )
    assert response.status_code == 201
    return api_client


@pytest.fixture
def rate_limited():
    return ContentServiceError(429, "Rate limit exceeded. Please try again later.")
