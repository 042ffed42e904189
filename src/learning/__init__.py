"""
Learning-session core: content contract, session engine, mode adapters, reward policy.

Framework-free; the FastAPI app in `quickstudy` wires it to HTTP and the database.
"""

from learning.client import ContentGenerationClient, ContentService, ContentServiceError, HttpContentService
from learning.context import LearnerContext
from learning.engine import SessionEngine
from learning.payloads import ContentPayload, Mode, parse_payload
from learning.state import Completion, Outcome, SessionStatus

__all__ = [
    "ContentGenerationClient",
    "ContentService",
    "ContentServiceError",
    "HttpContentService",
    "LearnerContext",
    "SessionEngine",
    "ContentPayload",
    "Mode",
    "parse_payload",
    "Completion",
    "Outcome",
    "SessionStatus",
]
