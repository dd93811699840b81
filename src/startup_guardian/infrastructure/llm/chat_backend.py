"""LangChain chat-model backend.

Wraps any LangChain chat model (``ChatAnthropic``, ``ChatGoogleGenerativeAI``,
a test double...) as a :class:`ModelBackend`.  Sends the versioned report
prompt, flattens the reply into text and gathers web citations from
whichever place the provider reports them:

* Gemini: ``response_metadata["grounding_metadata"]["grounding_chunks"]``;
* Anthropic: ``citations`` attached to text content blocks.

Both are normalized to ``{"web": {"uri": ..., "title": ...}}``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from langchain_core.messages import BaseMessage

from startup_guardian.domain.exceptions import BackendUnavailableError
from startup_guardian.infrastructure.config import GuardianConfig
from startup_guardian.infrastructure.llm import BackendReply, ModelBackend
from startup_guardian.services.prompts import build_messages

logger = logging.getLogger(__name__)


def _message_text(message: Any) -> str:
    """Concatenate the text parts of a chat message's content."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content or ():
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


def _metadata_citations(message: Any) -> list[dict[str, Any]]:
    metadata = getattr(message, "response_metadata", None) or {}
    grounding = metadata.get("grounding_metadata") or {}
    chunks = grounding.get("grounding_chunks") or grounding.get("groundingChunks") or []
    return [c for c in chunks if isinstance(c, dict)]


def _block_citations(message: Any) -> list[dict[str, Any]]:
    content = getattr(message, "content", None)
    if not isinstance(content, list):
        return []
    found: list[dict[str, Any]] = []
    for block in content:
        if not isinstance(block, dict):
            continue
        for cite in block.get("citations") or ():
            if isinstance(cite, dict) and cite.get("url"):
                found.append({"web": {"uri": cite["url"], "title": cite.get("title")}})
    return found


def extract_citations(message: Any) -> tuple[dict[str, Any], ...]:
    """All citations on *message*, metadata first, in provider order."""
    return tuple(_metadata_citations(message) + _block_citations(message))


class ChatModelBackend(ModelBackend):
    """Backend over a LangChain chat model.

    Parameters
    ----------
    model:
        Anything with ``ainvoke(messages)`` returning a chat message: a
        ``BaseChatModel`` or one with tools bound.
    message_builder:
        Renders the prompt for a query.  Defaults to the versioned report
        prompt.
    """

    def __init__(
        self,
        model: Any,
        message_builder: Callable[[str], list[BaseMessage]] = build_messages,
    ) -> None:
        self._model = model
        self._build_messages = message_builder

    @property
    def backend_name(self) -> str:
        llm_type = getattr(self._model, "_llm_type", None)
        return f"langchain-{llm_type}" if llm_type else "langchain"

    async def generate(self, query: str) -> BackendReply:
        """Make one model call for *query*.

        Raises
        ------
        BackendUnavailableError
            On any provider failure or an empty reply.
        """
        messages = self._build_messages(query)
        logger.info("ChatModelBackend: querying %s for %r", self.backend_name, query)
        try:
            message = await self._model.ainvoke(messages)
        except Exception as exc:
            logger.exception("ChatModelBackend: model call failed")
            raise BackendUnavailableError(
                f"Model call failed: {exc}",
                query=query,
                details={"error_type": type(exc).__name__},
            ) from exc

        text = _message_text(message)
        if not text.strip():
            raise BackendUnavailableError("No response from model", query=query)

        citations = extract_citations(message)
        metadata = getattr(message, "response_metadata", None) or {}
        logger.info(
            "ChatModelBackend: %d chars, %d citations", len(text), len(citations)
        )
        return BackendReply(
            text=text,
            citations=citations,
            model=str(metadata.get("model_name") or metadata.get("model") or ""),
        )

    def __repr__(self) -> str:
        return f"ChatModelBackend(model={self._model!r})"


def build_chat_model(config: GuardianConfig) -> Any:
    """Default model: Claude with the server-side web-search tool bound.

    Requires the ``anthropic`` extra (``pip install startup-guardian[anthropic]``).
    """
    config.validate()
    try:
        from langchain_anthropic import ChatAnthropic
    except ImportError as exc:
        raise ImportError(
            "The 'langchain-anthropic' package is required for the default "
            "model. Install it with: pip install 'startup-guardian[anthropic]'"
        ) from exc

    model = ChatAnthropic(
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    if config.max_searches == 0:
        return model
    return model.bind_tools(
        [
            {
                "type": "web_search_20250305",
                "name": "web_search",
                "max_uses": config.max_searches,
            }
        ]
    )
