"""
Local content generation through Ollama.

OllamaLLM wraps LangChain's ChatOllama; OllamaContentService turns a mode prompt
into the raw JSON a ContentGenerationClient validates.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from typing import Any, Callable, Tuple

import httpx
from langchain_ollama import ChatOllama
from ollama import ResponseError

from learning.client import ContentService, ContentServiceError
from learning.context import LearnerContext
from learning.payloads import Mode

logger = logging.getLogger("infra.llm")

DEFAULT_TIMEOUT = 120.0

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class OllamaLLM:
    def __init__(self, model: str, temperature: float = 0.7, base_url: str = "http://localhost:11434"):
        self.model = model
        self._chat_llm = ChatOllama(model=model, temperature=temperature, base_url=base_url)

    async def agenerate(self, system: str, prompt: str, timeout: float = DEFAULT_TIMEOUT) -> str:
        """
        One chat completion. Timeouts surface as ContentServiceError(504),
        an unreachable server as ContentServiceError(503).
        """
        start_time = time.time()
        try:
            result = await asyncio.wait_for(
                self._chat_llm.ainvoke([("system", system), ("human", prompt)]),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            elapsed = time.time() - start_time
            logger.error("llm call timed out model=%s elapsed=%.2fs timeout=%ss", self.model, elapsed, timeout)
            raise ContentServiceError(504, f"LLM call timed out after {timeout}s") from None
        except (ConnectionError, httpx.ConnectError) as e:
            logger.error("ollama unreachable model=%s error=%s", self.model, e)
            raise ContentServiceError(503, "Cannot connect to Ollama. Is 'ollama serve' running?") from e
        except ResponseError as e:
            logger.error("ollama error model=%s status=%s error=%s", self.model, e.status_code, e.error)
            raise ContentServiceError(e.status_code, e.error) from e

        elapsed = time.time() - start_time
        logger.info("llm call completed model=%s elapsed=%.2fs", self.model, elapsed)
        if elapsed > 60:
            logger.warning("llm call slow model=%s elapsed=%.2fs; consider a smaller model", self.model, elapsed)
        content = getattr(result, "content", result)
        return content if isinstance(content, str) else str(content)


def extract_json(text: str) -> Any:
    """First {...} block of a model reply, parsed. Falls back to the raw text."""
    match = _JSON_BLOCK.search(text or "")
    if not match:
        return text
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        return text


class OllamaContentService(ContentService):
    def __init__(
        self,
        llm: OllamaLLM,
        prompt_builder: Callable[[str, Mode], Tuple[str, str]],
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.llm = llm
        self.prompt_builder = prompt_builder
        self.timeout = timeout

    async def fetch(self, context: LearnerContext, topic: str, mode: Mode) -> Any:
        system, prompt = self.prompt_builder(topic, mode)
        logger.debug("generating %s content for topic=%r user=%s", mode.value, topic, context.user_id)
        reply = await self.llm.agenerate(system, prompt, timeout=self.timeout)
        return extract_json(reply)
