"""Value objects for startup-guardian.

All types here are frozen dataclasses -- immutable, compared by value.
They are the fully-validated, typed shapes handed to the presentation
layer.  Optional pillar extras use ``None`` to mean "not applicable to this
pillar", never "unknown".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from .enums import Rating, ResponseMode, RiskLevel, StatusColor, Verdict

#: Sentinel used by comparison rows when no company wins.
TIE = "Tie"

#: The ten fixed evaluation categories, keyed by pillar id.
PILLAR_TITLES: Mapping[int, str] = {
    1: "Money & Survival Time",
    2: "Big Tech Risk",
    3: "Team Stability",
    4: "Work-Life Balance",
    5: "Comp & Equity",
    6: "Founder Competence",
    7: "Do People Like the Product?",
    8: "Tech Debt",
    9: "Market Opportunity",
    10: "Manager Quality",
}


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Source:
    """A web citation backing a claim in the report."""

    title: str
    uri: str


# ---------------------------------------------------------------------------
# Pillar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RevenuePoint:
    year: str
    revenue: float  # millions USD


@dataclass(frozen=True)
class UserBasePoint:
    year: str
    users: float


@dataclass(frozen=True)
class SocialLink:
    platform: str
    uri: str


@dataclass(frozen=True)
class FounderContent:
    title: str
    uri: str
    source: str


@dataclass(frozen=True)
class Pillar:
    """One of the ten evaluation categories of a single-company report.

    ``weight`` is the percentage string declared by the model (e.g.
    ``"25%"``); the numeric weight a user scores with lives in a
    :class:`~startup_guardian.services.scoring.WeightSession`.
    """

    id: int
    title: str
    weight: str
    status: StatusColor
    summary: str = ""
    details: Mapping[str, str] = field(default_factory=dict)  # label -> text, ordered
    revenue_data: tuple[RevenuePoint, ...] | None = None
    user_base_data: tuple[UserBasePoint, ...] | None = None
    founder_socials: tuple[SocialLink, ...] | None = None
    founder_content: tuple[FounderContent, ...] | None = None

    @property
    def category(self) -> str:
        """Canonical category name for this pillar's id (empty if unknown)."""
        return PILLAR_TITLES.get(self.id, "")


# ---------------------------------------------------------------------------
# Single-company report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompanyProfile:
    name: str = ""
    founded: str = ""
    location: str = ""
    product: str = ""
    use_case: str = ""
    last_funding: str = ""


@dataclass(frozen=True)
class StabilityScore:
    """A 0-100 score with its derived risk tier and verdict.

    Used both for the model's own judgment and for the client-side
    recomputation in :func:`~startup_guardian.services.scoring.compute_score`.
    """

    score: int
    risk_level: RiskLevel
    verdict: Verdict


@dataclass(frozen=True)
class CareerImpact:
    learning: Rating = Rating.MED
    brand: Rating = Rating.MED
    wlb: Rating = Rating.MED
    job_security: Rating = Rating.MED
    comp_upside: Rating = Rating.MED
    visa_safety: Rating = Rating.MED


@dataclass(frozen=True)
class ReportSummary:
    upside: str = ""
    red_flags: str = ""
    unknowns: str = ""
    guardian_take: str = ""


@dataclass(frozen=True)
class RecommendedRead:
    title: str
    uri: str
    source: str = ""
    summary: str = ""


@dataclass(frozen=True)
class Transparency:
    penalty: float = 0.0
    missing_data: tuple[str, ...] = ()


@dataclass(frozen=True)
class VisaSafety:
    h1b_sponsor: str = "Unsure"
    green_card: str = "Unsure"
    e_verify: str = "Unsure"


@dataclass(frozen=True)
class SafetyReport:
    """Deep-dive report on one company (the ``single`` response mode)."""

    profile: CompanyProfile
    stability_score: StabilityScore
    pillars: tuple[Pillar, ...] = ()
    career_impact: CareerImpact = field(default_factory=CareerImpact)
    summary: ReportSummary = field(default_factory=ReportSummary)
    transparency: Transparency = field(default_factory=Transparency)
    visa_safety: VisaSafety = field(default_factory=VisaSafety)
    recommended_reads: tuple[RecommendedRead, ...] = ()
    sources: tuple[Source, ...] = ()

    @property
    def mode(self) -> ResponseMode:
        return ResponseMode.SINGLE

    def pillar(self, pillar_id: int) -> Pillar | None:
        """Return the pillar with *pillar_id*, or ``None``."""
        for p in self.pillars:
            if p.id == pillar_id:
                return p
        return None


# ---------------------------------------------------------------------------
# Battle mode
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ComparisonRow:
    """One feature compared across companies.

    ``winner`` is a company name or :data:`TIE`.  It may name a company that
    is missing from ``company_values``; renderers must tolerate that.
    """

    feature: str
    company_values: Mapping[str, str] = field(default_factory=dict)
    winner: str = TIE

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE

    def value_for(self, company: str) -> str:
        return self.company_values.get(company, "")


@dataclass(frozen=True)
class ComparisonReport:
    """Feature-by-feature comparison of two or more companies."""

    companies: tuple[str, ...]
    rows: tuple[ComparisonRow, ...] = ()
    guardian_verdict: str = ""
    sources: tuple[Source, ...] = ()

    @property
    def mode(self) -> ResponseMode:
        return ResponseMode.BATTLE

    def winner_of(self, row: ComparisonRow) -> str:
        """Winner of *row*: a company name or :data:`TIE`.

        A winner missing from ``companies`` or from the row's values is
        still returned as given.
        """
        return row.winner or TIE

    def wins(self) -> dict[str, int]:
        """Count row wins per listed company (ties and unknown winners skipped)."""
        tally = {c: 0 for c in self.companies}
        for row in self.rows:
            winner = self.winner_of(row)
            if winner in tally:
                tally[winner] += 1
        return tally


# ---------------------------------------------------------------------------
# Ambiguous mode
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AmbiguityResponse:
    """The query matched several distinct entities; the user must pick one."""

    options: tuple[str, ...] = ()
    original_query: str = ""

    @property
    def mode(self) -> ResponseMode:
        return ResponseMode.AMBIGUOUS


ReportResult = Union[SafetyReport, ComparisonReport, AmbiguityResponse]


def result_mode(result: ReportResult) -> ResponseMode:
    """Return the variant tag of *result*.

    Raises ``TypeError`` for anything that is not one of the three variants
    so a new variant cannot silently fall through.
    """
    if isinstance(result, SafetyReport):
        return ResponseMode.SINGLE
    if isinstance(result, ComparisonReport):
        return ResponseMode.BATTLE
    if isinstance(result, AmbiguityResponse):
        return ResponseMode.AMBIGUOUS
    raise TypeError(f"Unknown report variant: {type(result).__name__}")
