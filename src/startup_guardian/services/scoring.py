"""Client-side stability scoring.

Recomputes a report's overall score, risk tier and verdict from a
user-adjustable weight vector over the ten pillars, without another model
call.  Each pillar contributes a coarse anchor for its status colour
(Green 90, Yellow 50, Red 10); the score is the weighted mean of those
anchors, rounded half-up.

:func:`compute_score` is pure.  Per-session mutable weights live in a
:class:`WeightSession` that callers pass around explicitly.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

import numpy as np

from startup_guardian.domain.enums import RiskLevel, StatusColor, Verdict
from startup_guardian.domain.values import Pillar, SafetyReport, StabilityScore

logger = logging.getLogger(__name__)

STATUS_PROXY: Mapping[StatusColor, int] = {
    StatusColor.GREEN: 90,
    StatusColor.YELLOW: 50,
    StatusColor.RED: 10,
}

MIN_WEIGHT = 0
MAX_WEIGHT = 100
TARGET_TOTAL = 100

# (lower bound inclusive, risk, verdict), ascending; later bands override.
_BANDS: tuple[tuple[int, RiskLevel, Verdict], ...] = (
    (50, RiskLevel.MEDIUM, Verdict.REASONABLE_BET),
    (75, RiskLevel.LOW, Verdict.STRONG_BUY),
)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_declared_weight(weight: str | None) -> int:
    """Read the integer prefix of a declared weight such as ``"25%"``.

    Non-numeric or missing values give 0.  The result is clamped to
    ``[0, 100]``.
    """
    match = _LEADING_INT_RE.match(weight or "")
    if match is None:
        return 0
    return _clamp(int(match.group(1)))


def _clamp(value: int) -> int:
    return max(MIN_WEIGHT, min(MAX_WEIGHT, value))


def initial_weights(pillars: Sequence[Pillar]) -> dict[int, int]:
    """Weight vector taken from each pillar's declared percentage."""
    return {p.id: parse_declared_weight(p.weight) for p in pillars}


def classify_score(score: int) -> tuple[RiskLevel, Verdict]:
    """Map a 0-100 score to its risk tier and verdict."""
    risk, verdict = RiskLevel.HIGH, Verdict.CAUTION
    for lower, band_risk, band_verdict in _BANDS:
        if score >= lower:
            risk, verdict = band_risk, band_verdict
    return risk, verdict


def compute_score(
    pillars: Sequence[Pillar],
    weights: Mapping[int, int],
    use_ai: bool,
    ai_score: StabilityScore,
) -> StabilityScore:
    """Derive ``{score, risk, verdict}`` for a single-company report.

    Parameters
    ----------
    pillars:
        The report's pillars; only ``id`` and ``status`` are read.
    weights:
        Pillar id -> integer percentage.  Ids absent from the mapping weigh 0.
        The sum need not be 100; the mean is taken over the actual total.
    use_ai:
        If ``True``, *ai_score* is returned unchanged.
    ai_score:
        The model's own judgment.

    Returns
    -------
    StabilityScore
        With a zero total weight the score is 0.
    """
    if use_ai:
        return ai_score

    proxies = np.array([STATUS_PROXY[p.status] for p in pillars], dtype=np.int64)
    w = np.array([weights.get(p.id, 0) for p in pillars], dtype=np.int64)

    weighted_sum = int(np.dot(proxies, w)) if len(pillars) else 0
    total = max(int(w.sum()), 1)

    # round(weighted_sum / total) with halves rounded up, in exact integers
    score = (2 * weighted_sum + total) // (2 * total)
    risk, verdict = classify_score(score)
    return StabilityScore(score=score, risk_level=risk, verdict=verdict)


class WeightSession:
    """Mutable weight state for one displayed report.

    Starts on the model's own score (``use_ai``).  Any edit switches to the
    client-side recomputation; :meth:`reset` switches back.  Edits never
    rebalance other pillars -- :attr:`is_balanced` tells the UI whether to
    warn that the total is not 100%.

    Usage::

        session = WeightSession.from_report(report)
        session.set_weight(1, 40)
        session.score()
    """

    def __init__(self, report: SafetyReport) -> None:
        self._report = report
        self._declared = initial_weights(report.pillars)
        self._weights: dict[int, int] = dict(self._declared)
        self._use_ai = True

    @classmethod
    def from_report(cls, report: SafetyReport) -> WeightSession:
        return cls(report)

    @property
    def report(self) -> SafetyReport:
        return self._report

    @property
    def weights(self) -> dict[int, int]:
        """A copy of the current weight vector."""
        return dict(self._weights)

    @property
    def use_ai(self) -> bool:
        return self._use_ai

    @property
    def total(self) -> int:
        return sum(self._weights.values())

    @property
    def is_balanced(self) -> bool:
        return self.total == TARGET_TOTAL

    def set_weight(self, pillar_id: int, value: int) -> None:
        """Set one pillar's weight, clamped to ``[0, 100]``.

        Raises ``KeyError`` if the report has no pillar *pillar_id*.
        """
        if pillar_id not in self._weights:
            raise KeyError(f"Report has no pillar with id {pillar_id}")
        self._weights[pillar_id] = _clamp(int(value))
        self._use_ai = False
        logger.debug("WeightSession: pillar %d -> %d (total %d)", pillar_id, value, self.total)

    def reset(self) -> None:
        """Restore declared weights and the model's own score."""
        self._weights = dict(self._declared)
        self._use_ai = True

    def score(self) -> StabilityScore:
        return compute_score(
            self._report.pillars,
            self._weights,
            self._use_ai,
            self._report.stability_score,
        )

    def __repr__(self) -> str:
        return (
            f"WeightSession(company={self._report.profile.name!r}, "
            f"total={self.total}, use_ai={self._use_ai})"
        )
