"""Mock chat model for testing and offline demos.

Provides ``MockChatModel``, a LangChain ``BaseChatModel`` that replies with
pre-configured text and Gemini-style grounding metadata.  Plug it into
:class:`~startup_guardian.infrastructure.llm.chat_backend.ChatModelBackend`
to exercise the full acquisition path without an API key.
"""

from __future__ import annotations

from typing import Any

from langchain_core.callbacks import CallbackManagerForLLMRun
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import ConfigDict


class MockChatModel(BaseChatModel):
    """A mock chat model returning scripted replies.

    Usage::

        model = MockChatModel(
            responses=['{"mode": "single", "report": {...}}'],
            grounding_chunks=[{"web": {"uri": "https://x", "title": "X"}}],
        )
        # Each call returns the next response in order, cycling at the end.

    Set ``error`` to make every call raise it instead.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    responses: list[str] = []
    grounding_chunks: list[dict[str, Any]] = []
    error: Exception | None = None
    _call_index: int = 0

    @property
    def _llm_type(self) -> str:
        return "mock-chat"

    @property
    def call_count(self) -> int:
        return self._call_index

    def _generate(
        self,
        messages: list[BaseMessage],
        stop: list[str] | None = None,
        run_manager: CallbackManagerForLLMRun | None = None,
        **kwargs: Any,
    ) -> ChatResult:
        self._call_index += 1
        if self.error is not None:
            raise self.error

        idx = (self._call_index - 1) % len(self.responses) if self.responses else 0
        text = self.responses[idx] if self.responses else ""
        metadata: dict[str, Any] = {"model_name": "mock-chat"}
        if self.grounding_chunks:
            metadata["grounding_metadata"] = {
                "grounding_chunks": list(self.grounding_chunks)
            }
        return ChatResult(
            generations=[
                ChatGeneration(
                    message=AIMessage(content=text, response_metadata=metadata)
                )
            ]
        )
