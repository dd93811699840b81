"""Domain layer for startup-guardian.

Re-exports all public domain types so that consumers can write::

    from startup_guardian.domain import SafetyReport, Pillar, StatusColor
"""

# -- Enumerations -------------------------------------------------------------
from .enums import Rating, ResponseMode, RiskLevel, StatusColor, Verdict

# -- Value Objects ------------------------------------------------------------
from .values import (
    PILLAR_TITLES,
    TIE,
    AmbiguityResponse,
    CareerImpact,
    CompanyProfile,
    ComparisonReport,
    ComparisonRow,
    FounderContent,
    Pillar,
    RecommendedRead,
    ReportResult,
    ReportSummary,
    RevenuePoint,
    SafetyReport,
    SocialLink,
    Source,
    StabilityScore,
    Transparency,
    UserBasePoint,
    VisaSafety,
    result_mode,
)

# -- Exceptions ---------------------------------------------------------------
from .exceptions import (
    AcquisitionError,
    BackendUnavailableError,
    CacheError,
    CacheReadError,
    CacheWriteError,
    MalformedResponseError,
    StartupGuardianError,
)

__all__ = [
    # Enums
    "Rating",
    "ResponseMode",
    "RiskLevel",
    "StatusColor",
    "Verdict",
    # Values
    "PILLAR_TITLES",
    "TIE",
    "AmbiguityResponse",
    "CareerImpact",
    "CompanyProfile",
    "ComparisonReport",
    "ComparisonRow",
    "FounderContent",
    "Pillar",
    "RecommendedRead",
    "ReportResult",
    "ReportSummary",
    "RevenuePoint",
    "SafetyReport",
    "SocialLink",
    "Source",
    "StabilityScore",
    "Transparency",
    "UserBasePoint",
    "VisaSafety",
    "result_mode",
    # Exceptions
    "AcquisitionError",
    "BackendUnavailableError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "MalformedResponseError",
    "StartupGuardianError",
]
