from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from infra.llm.ollama import OllamaContentService, OllamaLLM
from learning.client import ContentGenerationClient, ContentService, HttpContentService
from quickstudy.config import get_session_factory, settings
from quickstudy.prompt_builders import build_content_prompts
from quickstudy.services.activity_recorder import ActivityRecorder


def build_content_service() -> ContentService:
    if settings.CONTENT_BACKEND == "http":
        if not settings.CONTENT_SERVICE_URL:
            raise RuntimeError("CONTENT_SERVICE_URL must be set when CONTENT_BACKEND=http")
        return HttpContentService(settings.CONTENT_SERVICE_URL, timeout=settings.CONTENT_SERVICE_TIMEOUT)

    llm = OllamaLLM(model=settings.OLLAMA_MODEL, base_url=settings.OLLAMA_BASE_URL)
    return OllamaContentService(llm, build_content_prompts, timeout=settings.LLM_TIMEOUT)


@lru_cache(maxsize=1)
def get_content_client() -> ContentGenerationClient:
    return ContentGenerationClient(build_content_service())


def get_activity_recorder(session_factory: sessionmaker = Depends(get_session_factory)) -> ActivityRecorder:
    return ActivityRecorder(session_factory)
