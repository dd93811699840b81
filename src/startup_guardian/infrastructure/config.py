"""Runtime configuration for startup-guardian.

``GuardianConfig`` is a plain frozen ``dataclass`` with a ``validate()``
method that raises ``ValueError`` on invalid values.  The cache TTL and the
schema version are deliberately absent: they are fixed policy, not settings.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any

ENV_PREFIX = "STARTUP_GUARDIAN_"

DEFAULT_CACHE_DIR = "~/.cache/startup-guardian"


@dataclass(frozen=True)
class GuardianConfig:
    """Settings for the model backend and the local cache.

    Attributes
    ----------
    model:
        Chat model identifier passed to the LangChain integration.
    temperature:
        Sampling temperature.  Kept low so repeated searches score alike.
    max_tokens:
        Maximum tokens in the model's reply; a full ten-pillar report is long.
    max_searches:
        Upper bound on server-side web searches per query.
    cache_dir:
        Directory for cached reports.  Empty string keeps the cache in
        memory for the lifetime of the process.
    """

    model: str = "claude-sonnet-4-5"
    temperature: float = 0.2
    max_tokens: int = 8192
    max_searches: int = 5
    cache_dir: str = DEFAULT_CACHE_DIR

    def validate(self) -> None:
        """Raise ``ValueError`` if any field is out of valid range."""
        if not self.model:
            raise ValueError("model must not be empty")
        if not (0.0 <= self.temperature <= 2.0):
            raise ValueError(
                f"temperature must be in [0, 2], got {self.temperature}"
            )
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")
        if self.max_searches < 0:
            raise ValueError(
                f"max_searches must be >= 0, got {self.max_searches}"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GuardianConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GuardianConfig:
        """Build a config from ``STARTUP_GUARDIAN_*`` environment variables.

        ``STARTUP_GUARDIAN_MODEL`` sets ``model``, and so on.  Unset
        variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        casts = {f.name: type(getattr(cls(), f.name)) for f in fields(cls)}
        data: dict[str, Any] = {}
        for name, cast in casts.items():
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            try:
                data[name] = cast(raw)
            except ValueError as exc:
                raise ValueError(
                    f"{ENV_PREFIX}{name.upper()} must be {cast.__name__}, got {raw!r}"
                ) from exc
        return cls.from_dict(data)
