"""Public testing utilities for startup-guardian.

Provides a mock chat model for writing self-contained examples and tests
without requiring API keys.
"""

from startup_guardian.testing.mock_llm import MockChatModel

__all__ = ["MockChatModel"]
