"""Service layer for startup-guardian.

Re-exports public service types for convenient top-level access::

    from startup_guardian.services import (
        normalize_query, ResponseParser, compute_score, WeightSession,
        ReportAcquisitionOrchestrator,
    )

The orchestrator is loaded lazily because it depends on the
infrastructure layer, which itself uses the parser.
"""

from startup_guardian.services.normalizer import normalize_query
from startup_guardian.services.parser import (
    ResponseParser,
    extract_json_object,
    extract_sources,
)
from startup_guardian.services.prompts import (
    CACHE_KEY_PREFIX,
    REPORT_PROMPT,
    RESPONSE_SCHEMA,
    SCHEMA_VERSION,
    build_messages,
)
from startup_guardian.services.scoring import (
    STATUS_PROXY,
    WeightSession,
    classify_score,
    compute_score,
    initial_weights,
    parse_declared_weight,
)

__all__ = [
    # normalizer
    "normalize_query",
    # parser
    "ResponseParser",
    "extract_json_object",
    "extract_sources",
    # prompts
    "CACHE_KEY_PREFIX",
    "REPORT_PROMPT",
    "RESPONSE_SCHEMA",
    "SCHEMA_VERSION",
    "build_messages",
    # scoring
    "STATUS_PROXY",
    "WeightSession",
    "classify_score",
    "compute_score",
    "initial_weights",
    "parse_declared_weight",
    # acquisition
    "ReportAcquisitionOrchestrator",
]


def __getattr__(name: str):  # noqa: N807
    if name == "ReportAcquisitionOrchestrator":
        from startup_guardian.services.acquisition import ReportAcquisitionOrchestrator

        return ReportAcquisitionOrchestrator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
