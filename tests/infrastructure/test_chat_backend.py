"""Tests for the LangChain chat-model backend."""

from __future__ import annotations

from typing import Any

import pytest
from langchain_core.messages import AIMessage

from startup_guardian.domain.exceptions import BackendUnavailableError
from startup_guardian.infrastructure.llm import BackendReply
from startup_guardian.infrastructure.llm.chat_backend import (
    ChatModelBackend,
    extract_citations,
)
from startup_guardian.services.prompts import build_messages
from startup_guardian.testing.mock_llm import MockChatModel
from tests.helpers.payloads import GROUNDING_CHUNKS


class _StaticModel:
    """Returns one fixed message from ``ainvoke``."""

    _llm_type = "static"

    def __init__(self, message: AIMessage) -> None:
        self.message = message
        self.received: list[Any] = []

    async def ainvoke(self, messages: list[Any]) -> AIMessage:
        self.received.append(messages)
        return self.message


class TestExtractCitations:
    def test_metadata_chunks(self) -> None:
        message = AIMessage(
            content="{}",
            response_metadata={"grounding_metadata": {"grounding_chunks": GROUNDING_CHUNKS}},
        )
        assert extract_citations(message) == tuple(GROUNDING_CHUNKS)

    def test_content_block_citations(self) -> None:
        message = AIMessage(
            content=[
                {
                    "type": "text",
                    "text": "{}",
                    "citations": [
                        {"url": "https://a.example", "title": "A"},
                        {"title": "no url"},
                    ],
                },
                {"type": "server_tool_use", "name": "web_search"},
            ]
        )
        assert extract_citations(message) == (
            {"web": {"uri": "https://a.example", "title": "A"}},
        )

    def test_none(self) -> None:
        assert extract_citations(AIMessage(content="plain")) == ()


class TestChatModelBackend:
    @pytest.mark.asyncio
    async def test_generate_with_mock_model(self) -> None:
        model = MockChatModel(responses=['{"mode": "single"}'], grounding_chunks=GROUNDING_CHUNKS)
        backend = ChatModelBackend(model)

        reply = await backend.generate("Stripe")

        assert reply == BackendReply(
            text='{"mode": "single"}',
            citations=tuple(GROUNDING_CHUNKS),
            model="mock-chat",
        )
        assert backend.backend_name == "langchain-mock-chat"
        assert model.call_count == 1

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self) -> None:
        message = AIMessage(
            content=[
                {"type": "text", "text": '{"mode": '},
                {"type": "server_tool_use", "name": "web_search"},
                {"type": "text", "text": '"battle"}'},
            ]
        )
        reply = await ChatModelBackend(_StaticModel(message)).generate("Ramp vs Brex")
        assert reply.text == '{"mode": "battle"}'

    @pytest.mark.asyncio
    async def test_sends_versioned_prompt(self) -> None:
        model = _StaticModel(AIMessage(content="{}"))
        await ChatModelBackend(model).generate("Stripe")
        assert len(model.received) == 1
        sent = model.received[0]
        assert [m.type for m in sent] == [m.type for m in build_messages("Stripe")]
        assert "Stripe" in sent[-1].content

    @pytest.mark.asyncio
    async def test_model_error(self) -> None:
        backend = ChatModelBackend(MockChatModel(error=TimeoutError("slow")))
        with pytest.raises(BackendUnavailableError) as info:
            await backend.generate("Stripe")
        assert info.value.details["error_type"] == "TimeoutError"
        assert info.value.query == "Stripe"

    @pytest.mark.asyncio
    async def test_empty_reply(self) -> None:
        backend = ChatModelBackend(MockChatModel(responses=["   "]))
        with pytest.raises(BackendUnavailableError, match="No response"):
            await backend.generate("Stripe")
