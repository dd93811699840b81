"""Domain exceptions for startup-guardian.

All package exceptions inherit from ``StartupGuardianError`` so callers can
catch the full family with a single ``except`` clause when needed.

Two families exist:

* Cache errors (``CacheReadError`` / ``CacheWriteError``) are non-fatal.
  ``ReportCache`` raises them internally, logs them and carries on; they
  never reach the caller of an acquisition.
* Acquisition errors (``BackendUnavailableError`` / ``MalformedResponseError``)
  are fatal for the current search and cross the full boundary to the UI.
"""

from __future__ import annotations

from typing import Any


class StartupGuardianError(Exception):
    """Base exception for all startup-guardian errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


# ---------------------------------------------------------------------------
# Cache (absorbed)
# ---------------------------------------------------------------------------

class CacheError(StartupGuardianError):
    """Base class for local storage failures."""

    def __init__(
        self,
        message: str = "Cache operation failed",
        key: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.key = key


class CacheReadError(CacheError):
    """Raised when a cache record cannot be read or decoded."""


class CacheWriteError(CacheError):
    """Raised when a cache record cannot be serialized or stored.

    Typical causes: disk full, permission denied, or a payload that is not
    JSON-serializable.
    """


# ---------------------------------------------------------------------------
# Acquisition (surfaced)
# ---------------------------------------------------------------------------

class AcquisitionError(StartupGuardianError):
    """A report could not be produced for the current query.

    The UI presents every subclass the same way: a generic "try again"
    failure state with no partial data.
    """

    def __init__(
        self,
        message: str = "Report acquisition failed",
        query: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.query = query


class BackendUnavailableError(AcquisitionError):
    """Raised when the model backend cannot be reached or returns nothing."""


class MalformedResponseError(AcquisitionError):
    """Raised when no JSON object can be decoded from the model's reply."""

    def __init__(
        self,
        message: str = "Model returned invalid JSON format",
        query: str = "",
        excerpt: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, query, details)
        self.excerpt = excerpt
