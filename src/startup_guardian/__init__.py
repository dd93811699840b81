"""startup-guardian.

Answers "is this startup safe to join?": asks a web-searching model for a
ten-pillar safety report, validates the reply into typed data, caches it for
a week, and lets the user re-weigh the pillars locally without another
model call.
"""

__version__ = "0.1.0"

from startup_guardian.domain import (
    AmbiguityResponse,
    ComparisonReport,
    ReportResult,
    SafetyReport,
    StabilityScore,
)
from startup_guardian.services import (
    ResponseParser,
    WeightSession,
    compute_score,
    normalize_query,
)
from startup_guardian.services.acquisition import ReportAcquisitionOrchestrator

__all__ = [
    "AmbiguityResponse",
    "ComparisonReport",
    "ReportAcquisitionOrchestrator",
    "ReportResult",
    "ResponseParser",
    "SafetyReport",
    "StabilityScore",
    "WeightSession",
    "compute_score",
    "normalize_query",
]
