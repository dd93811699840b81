"""Domain enumerations for startup-guardian.

These enums capture the fixed vocabularies of a safety report: pillar
status colours, risk tiers, verdicts, coarse career ratings, and the three
response modes the model can answer in.
"""

from enum import Enum


class StatusColor(Enum):
    """Traffic-light status of a single pillar."""

    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"


class RiskLevel(Enum):
    """Overall risk tier derived from the stability score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Verdict(Enum):
    """Coarse recommendation derived from the risk tier."""

    STRONG_BUY = "Strong Buy"
    REASONABLE_BET = "Reasonable Bet"
    CAUTION = "Caution"


class Rating(Enum):
    """Three-step rating used by the career impact grid."""

    HIGH = "High"
    MED = "Med"
    LOW = "Low"


class ResponseMode(Enum):
    """Which surface a report result belongs to."""

    SINGLE = "single"
    BATTLE = "battle"
    AMBIGUOUS = "ambiguous"
