"""Serialization of report results for persistence.

Provides ``report_to_dict`` / ``report_from_dict`` round-trip conversion for
the three report variants.  The dict form is the tagged envelope
``{"mode": ..., "data": {...}}`` with camelCase keys matching the model's
response schema, so the reader reuses the parser's lenient projection.

Design goals:
- Every ``to_dict`` output is JSON-serializable.
- ``from_dict`` accepts permissive input and raises ``ValueError`` only for
  data that is not an envelope at all.
"""

from __future__ import annotations

import logging
from typing import Any

from startup_guardian.domain.enums import ResponseMode
from startup_guardian.domain.values import (
    AmbiguityResponse,
    ComparisonReport,
    Pillar,
    ReportResult,
    SafetyReport,
    Source,
    result_mode,
)
from startup_guardian.services.parser import (
    parse_ambiguous,
    parse_battle,
    parse_single,
)

logger = logging.getLogger(__name__)


# =========================================================================== #
#  Generic helpers                                                             #
# =========================================================================== #

def _sources_to_list(sources: tuple[Source, ...]) -> list[dict[str, str]]:
    return [{"title": s.title, "uri": s.uri} for s in sources]


def _sources_from_list(data: Any) -> tuple[Source, ...]:
    if not isinstance(data, list):
        return ()
    return tuple(
        Source(title=str(item.get("title", "")), uri=str(item.get("uri", "")))
        for item in data
        if isinstance(item, dict)
    )


def _records(items: Any, *keys: tuple[str, str]) -> list[dict[str, Any]] | None:
    """Map each item's attributes to camelCase keys; ``None`` stays ``None``."""
    if items is None:
        return None
    return [{wire: getattr(item, attr) for wire, attr in keys} for item in items]


# =========================================================================== #
#  Variants                                                                    #
# =========================================================================== #

def pillar_to_dict(p: Pillar) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": p.id,
        "title": p.title,
        "weight": p.weight,
        "status": p.status.value,
        "summary": p.summary,
        "details": dict(p.details),
    }
    optional = {
        "revenueData": _records(p.revenue_data, ("year", "year"), ("revenue", "revenue")),
        "userBaseData": _records(p.user_base_data, ("year", "year"), ("users", "users")),
        "founderSocials": _records(
            p.founder_socials, ("platform", "platform"), ("uri", "uri")
        ),
        "founderContent": _records(
            p.founder_content, ("title", "title"), ("uri", "uri"), ("source", "source")
        ),
    }
    data.update({k: v for k, v in optional.items() if v is not None})
    return data


def safety_report_to_dict(r: SafetyReport) -> dict[str, Any]:
    return {
        "companyProfile": {
            "name": r.profile.name,
            "founded": r.profile.founded,
            "location": r.profile.location,
            "product": r.profile.product,
            "useCase": r.profile.use_case,
            "lastFunding": r.profile.last_funding,
        },
        "stabilityScore": {
            "score": r.stability_score.score,
            "riskLevel": r.stability_score.risk_level.value,
            "verdict": r.stability_score.verdict.value,
        },
        "careerImpact": {
            "learning": r.career_impact.learning.value,
            "brand": r.career_impact.brand.value,
            "wlb": r.career_impact.wlb.value,
            "jobSecurity": r.career_impact.job_security.value,
            "compUpside": r.career_impact.comp_upside.value,
            "visaSafety": r.career_impact.visa_safety.value,
        },
        "summary": {
            "upside": r.summary.upside,
            "redFlags": r.summary.red_flags,
            "unknowns": r.summary.unknowns,
            "guardianTake": r.summary.guardian_take,
        },
        "recommendedReads": _records(
            r.recommended_reads,
            ("title", "title"),
            ("uri", "uri"),
            ("source", "source"),
            ("summary", "summary"),
        ),
        "pillars": [pillar_to_dict(p) for p in r.pillars],
        "transparency": {
            "penalty": r.transparency.penalty,
            "missingData": list(r.transparency.missing_data),
        },
        "visaSafety": {
            "h1bSponsor": r.visa_safety.h1b_sponsor,
            "greenCard": r.visa_safety.green_card,
            "eVerify": r.visa_safety.e_verify,
        },
        "sources": _sources_to_list(r.sources),
    }


def comparison_report_to_dict(r: ComparisonReport) -> dict[str, Any]:
    return {
        "companies": list(r.companies),
        "rows": [
            {
                "feature": row.feature,
                "companyValues": dict(row.company_values),
                "winner": row.winner,
            }
            for row in r.rows
        ],
        "guardianVerdict": r.guardian_verdict,
        "sources": _sources_to_list(r.sources),
    }


def ambiguity_response_to_dict(r: AmbiguityResponse) -> dict[str, Any]:
    return {
        "isAmbiguous": True,
        "ambiguousOptions": list(r.options),
        "originalQuery": r.original_query,
    }


# =========================================================================== #
#  Envelope                                                                    #
# =========================================================================== #

def report_to_dict(result: ReportResult) -> dict[str, Any]:
    """Serialize any report variant into a tagged, JSON-safe envelope."""
    mode = result_mode(result)
    if mode is ResponseMode.SINGLE:
        data = safety_report_to_dict(result)  # type: ignore[arg-type]
    elif mode is ResponseMode.BATTLE:
        data = comparison_report_to_dict(result)  # type: ignore[arg-type]
    else:
        data = ambiguity_response_to_dict(result)  # type: ignore[arg-type]
    return {"mode": mode.value, "data": data}


def report_from_dict(envelope: dict[str, Any]) -> ReportResult:
    """Rebuild a report variant from :func:`report_to_dict` output.

    An envelope without a ``mode`` tag is read as a single report.
    """
    if not isinstance(envelope, dict) or not isinstance(envelope.get("data"), dict):
        raise ValueError("Report envelope must be an object with a 'data' object")

    data = envelope["data"]
    mode = envelope.get("mode")
    sources = _sources_from_list(data.get("sources"))

    if mode == ResponseMode.AMBIGUOUS.value:
        return parse_ambiguous(data, str(data.get("originalQuery", "")))
    if mode == ResponseMode.BATTLE.value:
        return parse_battle(data, sources)
    if mode != ResponseMode.SINGLE.value:
        logger.debug("Envelope mode %r read as single report", mode)
    return parse_single(data, sources)
