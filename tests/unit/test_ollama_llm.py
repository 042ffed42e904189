"""Unit tests for OllamaLLM and OllamaContentService with a mocked ChatOllama."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from infra.llm.ollama import OllamaContentService, OllamaLLM, extract_json
from learning.client import ContentGenerationClient, ContentServiceError
from learning.context import LearnerContext
from learning.errors import MalformedContent, TransportError
from learning.payloads import FlashcardsContent, Mode
from quickstudy.prompt_builders import build_content_prompts

CONTEXT = LearnerContext(user_id=1, email="learner@example.com")


def _mock_chat(reply=None, side_effect=None):
    mock_chat = MagicMock()
    mock_chat.ainvoke = AsyncMock(return_value=MagicMock(content=reply), side_effect=side_effect)
    return mock_chat


@pytest.mark.unit
class TestExtractJson:
    def test_block_inside_prose(self):
        assert extract_json('Sure! Here it is:\n{"cards": []}\nEnjoy.') == {"cards": []}

    def test_no_block_returns_text(self):
        assert extract_json("no json here") == "no json here"

    def test_broken_block_returns_text(self):
        assert extract_json("{not: json}") == "{not: json}"


@pytest.mark.unit
class TestOllamaLLM:
    @pytest.mark.asyncio
    async def test_agenerate_sends_system_and_user(self):
        mock_chat = _mock_chat(reply="hello")
        with patch("infra.llm.ollama.ChatOllama", return_value=mock_chat):
            llm = OllamaLLM(model="test-model")
            result = await llm.agenerate("SYSTEM", "PROMPT", timeout=5.0)
        assert result == "hello"
        mock_chat.ainvoke.assert_called_once_with([("system", "SYSTEM"), ("human", "PROMPT")])

    @pytest.mark.asyncio
    async def test_timeout_maps_to_504(self):
        async def slow(*args, **kwargs):
            await asyncio.sleep(1)

        mock_chat = MagicMock()
        mock_chat.ainvoke = slow
        with patch("infra.llm.ollama.ChatOllama", return_value=mock_chat):
            llm = OllamaLLM(model="test-model")
            with pytest.raises(ContentServiceError) as exc:
                await llm.agenerate("s", "p", timeout=0.01)
        assert exc.value.status_code == 504

    @pytest.mark.asyncio
    async def test_connection_refused_maps_to_503(self):
        mock_chat = _mock_chat(side_effect=ConnectionError("refused"))
        with patch("infra.llm.ollama.ChatOllama", return_value=mock_chat):
            llm = OllamaLLM(model="test-model")
            with pytest.raises(ContentServiceError) as exc:
                await llm.agenerate("s", "p")
        assert exc.value.status_code == 503


@pytest.mark.unit
class TestOllamaContentService:
    @pytest.mark.asyncio
    async def test_generates_validated_payload(self):
        reply = 'Here you go:\n{"cards": [{"front": "H2O", "back": "Water"}]}'
        with patch("infra.llm.ollama.ChatOllama", return_value=_mock_chat(reply=reply)):
            service = OllamaContentService(OllamaLLM(model="test-model"), build_content_prompts)
            payload = await ContentGenerationClient(service).generate(CONTEXT, "Chemistry", Mode.FLASHCARDS)
        assert isinstance(payload, FlashcardsContent)
        assert payload.cards[0].back == "Water"

    @pytest.mark.asyncio
    async def test_prose_reply_is_malformed(self):
        with patch("infra.llm.ollama.ChatOllama", return_value=_mock_chat(reply="I can't do that.")):
            service = OllamaContentService(OllamaLLM(model="test-model"), build_content_prompts)
            with pytest.raises(MalformedContent):
                await ContentGenerationClient(service).generate(CONTEXT, "Chemistry", Mode.QUIZ)

    @pytest.mark.asyncio
    async def test_unreachable_is_transport_error(self):
        with patch("infra.llm.ollama.ChatOllama", return_value=_mock_chat(side_effect=ConnectionError("refused"))):
            service = OllamaContentService(OllamaLLM(model="test-model"), build_content_prompts)
            with pytest.raises(TransportError) as exc:
                await ContentGenerationClient(service).generate(CONTEXT, "Chemistry", Mode.QUIZ)
        assert exc.value.status_code == 503
