"""Model backend contract for startup-guardian.

The core never talks to a model SDK directly.  It needs one thing: given a
query, return the model's raw text plus any web citations it grounded the
answer on.

Public API
----------
ModelBackend
    Abstract base class every backend implements.
BackendReply
    Raw text plus citations in ``{"web": {"uri", "title"}}`` shape.
ChatModelBackend
    Backend over any LangChain chat model (lazy import).
build_chat_model
    Default web-search-enabled chat model (lazy import).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


# =========================================================================== #
#  Data structures                                                             #
# =========================================================================== #

@dataclass(frozen=True)
class BackendReply:
    """What a backend returns for one query.

    Attributes
    ----------
    text:
        The model's reply, expected to contain one JSON object.
    citations:
        Grounding chunks, each ``{"web": {"uri": str, "title": str}}``.
    model:
        The model that produced the reply, when the backend knows it.
    """

    text: str
    citations: tuple[dict[str, Any], ...] = ()
    model: str = ""


# =========================================================================== #
#  Abstract backend                                                            #
# =========================================================================== #

class ModelBackend(ABC):
    """A generative model with live web search.

    Implementations make exactly one remote call per :meth:`generate` and
    raise :class:`~startup_guardian.domain.exceptions.BackendUnavailableError`
    on any failure, including an empty reply.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Human-readable backend identifier."""
        ...

    @abstractmethod
    async def generate(self, query: str) -> BackendReply:
        """Ask the model about *query* under the versioned report prompt."""
        ...


__all__ = [
    "BackendReply",
    "ModelBackend",
]


# ---------------------------------------------------------------------------
# Lazy imports for the LangChain-backed implementation
# ---------------------------------------------------------------------------

def __getattr__(name: str):  # noqa: N807
    """Lazy-load the chat backend on attribute access."""
    _lazy_map = {
        "ChatModelBackend": "startup_guardian.infrastructure.llm.chat_backend",
        "build_chat_model": "startup_guardian.infrastructure.llm.chat_backend",
    }

    if name in _lazy_map:
        import importlib
        module = importlib.import_module(_lazy_map[name])
        return getattr(module, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
