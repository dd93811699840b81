"""Infrastructure layer for startup-guardian.

Re-exports the public API surface for convenience::

    from startup_guardian.infrastructure import (
        GuardianConfig,
        ReportCache, MemoryStore, FileStore, CACHE_TTL_MS,
        ModelBackend, BackendReply,
        report_to_dict, report_from_dict,
    )
"""

from startup_guardian.infrastructure.cache import (
    CACHE_TTL_MS,
    FileStore,
    KeyValueStore,
    MemoryStore,
    ReportCache,
)
from startup_guardian.infrastructure.config import GuardianConfig
from startup_guardian.infrastructure.llm import BackendReply, ModelBackend
from startup_guardian.infrastructure.serialization import (
    report_from_dict,
    report_to_dict,
)

__all__ = [
    # Cache
    "CACHE_TTL_MS",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "ReportCache",
    # Config
    "GuardianConfig",
    # LLM
    "BackendReply",
    "ModelBackend",
    # Serialization
    "report_from_dict",
    "report_to_dict",
]
