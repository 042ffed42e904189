"""
Content generation client.

Sends {topic, mode} to a content service and turns the reply into a validated
ContentPayload, or raises a typed GenerationError. No retries: the caller decides
whether to resubmit the same request.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from learning.context import LearnerContext
from learning.errors import (
    EmptyTopic,
    GenerationError,
    QuotaExhausted,
    RateLimited,
    TransportError,
)
from learning.payloads import ContentPayload, Mode, parse_payload

logger = logging.getLogger(__name__)


class ContentServiceError(Exception):
    """Non-success reply from a content service: HTTP-style status plus the service's message."""

    def __init__(self, status_code: int, message: str = ""):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ContentService(ABC):
    """
    Defines the contract for content services: raw mode-shaped JSON for a topic,
    or ContentServiceError.
    """

    @abstractmethod
    async def fetch(self, context: LearnerContext, topic: str, mode: Mode) -> Any:
        raise NotImplementedError


class HttpContentService(ContentService):
    """Remote content service reached over HTTP (POST {topic, mode})."""

    def __init__(self, url: str, timeout: float = 60.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, context: LearnerContext, topic: str, mode: Mode) -> Any:
        headers = {"Content-Type": "application/json"}
        if context.access_token:
            headers["Authorization"] = f"Bearer {context.access_token}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, json={"topic": topic, "mode": mode.value}, headers=headers)
        if response.status_code >= 400:
            raise ContentServiceError(response.status_code, _error_message(response))
        try:
            return response.json()
        except ValueError:
            # Not JSON at all; let payload validation report it as malformed.
            return response.text


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return response.text


def classify(status_code: int, message: str = "") -> GenerationError:
    """Map a service status to the generation error taxonomy."""
    if status_code == 429:
        return RateLimited(message) if message else RateLimited()
    if status_code == 402:
        return QuotaExhausted(message) if message else QuotaExhausted()
    return TransportError(message or f"Content service error: {status_code}", status_code=status_code)


class ContentGenerationClient:
    def __init__(self, service: ContentService):
        self.service = service

    async def generate(self, context: LearnerContext, topic: str, mode: Mode) -> ContentPayload:
        topic = (topic or "").strip()
        if not topic:
            raise EmptyTopic()
        logger.info("generating content user=%s mode=%s topic=%r", context.user_id, mode.value, topic)
        try:
            raw = await self.service.fetch(context, topic, mode)
        except ContentServiceError as e:
            logger.warning("content service error user=%s mode=%s status=%s", context.user_id, mode.value, e.status_code)
            raise classify(e.status_code, e.message) from e
        except httpx.HTTPError as e:
            logger.warning("content service unreachable user=%s mode=%s error=%s", context.user_id, mode.value, e)
            raise TransportError() from e
        payload = parse_payload(mode, raw)
        logger.info("content ready user=%s mode=%s items=%d", context.user_id, mode.value, len(payload.items()))
        return payload
