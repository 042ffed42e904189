"""
Error taxonomy for content generation and learning sessions.

ValidationError: bad input or content that failed the mode contract. No state changes.
GenerationError: the content service could not produce a payload (rate limit, quota, transport, malformed).
PersistenceFailure: bookkeeping after a completed session failed. Logged only.
"""

from __future__ import annotations


class LearningError(Exception):
    """Base class for every error raised by the learning core."""

    kind = "learning_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(LearningError):
    kind = "validation_error"


class EmptyTopic(ValidationError):
    kind = "empty_topic"

    def __init__(self, message: str = "Please enter a topic you want to learn about."):
        super().__init__(message)


class GenerationError(LearningError):
    """Content service failure. `retryable` tells the caller whether resubmitting can help."""

    kind = "generation_error"
    retryable = True


class RateLimited(GenerationError):
    kind = "rate_limited"

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class QuotaExhausted(GenerationError):
    kind = "quota_exhausted"
    retryable = False

    def __init__(self, message: str = "AI credits exhausted. Please add funds."):
        super().__init__(message)


class TransportError(GenerationError):
    kind = "transport_error"

    def __init__(self, message: str = "Failed to generate content. Please try again.", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedContent(GenerationError, ValidationError):
    """The service answered, but the payload does not match the mode's shape."""

    kind = "malformed_content"

    def __init__(self, message: str = "Generated content was malformed.", errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidAnswer(ValidationError):
    """The submitted value has the wrong shape for the current item."""

    kind = "invalid_answer"


class NoActiveSession(LearningError):
    kind = "no_active_session"

    def __init__(self, message: str = "No active learning session."):
        super().__init__(message)


class StaleGeneration(LearningError):
    """A generation finished after the learner reset or started another session."""

    kind = "stale_generation"

    def __init__(self, message: str = "Session was replaced before content arrived."):
        super().__init__(message)


class PersistenceFailure(LearningError):
    kind = "persistence_failure"
