"""Tolerant parser for the model's reply.

Turns noisy model output into one of the three typed report variants.
Recovery happens in fixed stages:

1. strip markdown code fences;
2. slice from the first ``{`` to the last ``}`` to drop surrounding prose;
3. strict ``json.loads`` -- failure here raises
   :class:`~startup_guardian.domain.exceptions.MalformedResponseError`, there
   is no second strategy;
4. classify the mode and project into a typed variant;
5. attach web citations taken from the backend's grounding chunks.

Stage 4 never raises: missing or mistyped fields fall back to neutral
defaults so a structurally valid but incomplete payload still renders.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from startup_guardian.domain.enums import Rating, RiskLevel, StatusColor, Verdict
from startup_guardian.domain.exceptions import MalformedResponseError
from startup_guardian.domain.values import (
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
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\n?|\n?```")
_EXCERPT_CHARS = 200

E = TypeVar("E", bound=Enum)


# -- Citation schema ---------------------------------------------------------


class WebReference(BaseModel):
    """The ``web`` part of a grounding chunk."""

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    uri: str | None = None
    title: str | None = None


class GroundingChunk(BaseModel):
    """A backend citation: ``{"web": {"uri": ..., "title": ...}}``."""

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    web: WebReference | None = None


def extract_sources(grounding_chunks: Iterable[Any] | None) -> tuple[Source, ...]:
    """Keep chunks exposing both a URI and a title, in their original order.

    No de-duplication is performed.
    """
    sources: list[Source] = []
    for raw in grounding_chunks or ():
        try:
            chunk = GroundingChunk.model_validate(raw)
        except ValidationError:
            logger.debug("Skipping unreadable grounding chunk: %r", raw)
            continue
        if chunk.web is not None and chunk.web.uri and chunk.web.title:
            sources.append(Source(title=chunk.web.title, uri=chunk.web.uri))
    return tuple(sources)


# -- JSON extraction ---------------------------------------------------------


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise json.JSONDecodeError(f"Non-standard constant {name}", name, 0)


def extract_json_object(raw_text: str) -> dict[str, Any]:
    """Decode the single JSON object embedded in *raw_text*.

    Raises
    ------
    MalformedResponseError
        If no JSON object can be located and decoded.
    """
    text = _FENCE_RE.sub("", raw_text or "").strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        text = text[start : end + 1]

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON from model reply: %.200s", text)
        raise MalformedResponseError(
            "Model returned invalid JSON format",
            excerpt=text[:_EXCERPT_CHARS],
            details={"position": exc.pos},
        ) from exc

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(data).__name__}",
            excerpt=text[:_EXCERPT_CHARS],
        )
    return data


# -- Lenient coercion --------------------------------------------------------


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value)


def _as_float(value: Any, default: float = 0.0) -> float:
    """Finite float for *value*, else *default* (NaN, infinities and overflow included)."""
    if isinstance(value, bool):
        return default
    try:
        if isinstance(value, (int, float)):
            result = float(value)
        elif isinstance(value, str):
            result = float(value.replace(",", "").strip())
        else:
            return default
    except (ValueError, OverflowError):
        return default
    return result if math.isfinite(result) else default


def _as_int(value: Any, default: int = 0) -> int:
    return int(round(_as_float(value, float(default))))


def _squash(text: str) -> str:
    return re.sub(r"[\s_\-]", "", text).lower()


def _as_enum(enum_cls: type[E], value: Any, default: E | None) -> E | None:
    """Match *value* against member values or names, ignoring case and spacing.

    ``"Strong Buy"``, ``"StrongBuy"`` and ``"STRONG_BUY"`` all resolve to
    ``Verdict.STRONG_BUY``.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = _squash(value)
        for member in enum_cls:
            if wanted in (_squash(str(member.value)), _squash(member.name)):
                return member
    return default


def _records(value: Any) -> list[dict[str, Any]]:
    return [item for item in _as_list(value) if isinstance(item, dict)]


def _optional_records(data: Mapping[str, Any], key: str) -> list[dict[str, Any]] | None:
    """Records under *key*, or ``None`` when the key is absent (not applicable)."""
    if data.get(key) is None:
        return None
    return _records(data[key])


# -- Single ------------------------------------------------------------------


def _parse_pillar(data: Mapping[str, Any]) -> Pillar:
    status = _as_enum(StatusColor, data.get("status"), None)
    # Unknown statuses take the neutral Yellow anchor (50) rather than
    # contributing nothing while their weight still counts.
    if status is None:
        logger.warning(
            "Pillar %r has unknown status %r, defaulting to Yellow",
            data.get("id"),
            data.get("status"),
        )
        status = StatusColor.YELLOW

    revenue = _optional_records(data, "revenueData")
    users = _optional_records(data, "userBaseData")
    socials = _optional_records(data, "founderSocials")
    content = _optional_records(data, "founderContent")

    return Pillar(
        id=_as_int(data.get("id")),
        title=_as_str(data.get("title")),
        weight=_as_str(data.get("weight")),
        status=status,
        summary=_as_str(data.get("summary")),
        details={
            str(label): _as_str(text)
            for label, text in _as_dict(data.get("details")).items()
        },
        revenue_data=None if revenue is None else tuple(
            RevenuePoint(year=_as_str(r.get("year")), revenue=_as_float(r.get("revenue")))
            for r in revenue
        ),
        user_base_data=None if users is None else tuple(
            UserBasePoint(year=_as_str(u.get("year")), users=_as_float(u.get("users")))
            for u in users
        ),
        founder_socials=None if socials is None else tuple(
            SocialLink(platform=_as_str(s.get("platform")), uri=_as_str(s.get("uri")))
            for s in socials
        ),
        founder_content=None if content is None else tuple(
            FounderContent(
                title=_as_str(c.get("title")),
                uri=_as_str(c.get("uri")),
                source=_as_str(c.get("source")),
            )
            for c in content
        ),
    )


def parse_single(report: Mapping[str, Any], sources: tuple[Source, ...] = ()) -> SafetyReport:
    """Project a ``report`` payload into a :class:`SafetyReport`."""
    profile = _as_dict(report.get("companyProfile"))
    score = _as_dict(report.get("stabilityScore"))
    impact = _as_dict(report.get("careerImpact"))
    summary = _as_dict(report.get("summary"))
    transparency = _as_dict(report.get("transparency"))
    visa = _as_dict(report.get("visaSafety"))

    def rating(key: str) -> Rating:
        return _as_enum(Rating, impact.get(key), Rating.MED)

    return SafetyReport(
        profile=CompanyProfile(
            name=_as_str(profile.get("name")),
            founded=_as_str(profile.get("founded")),
            location=_as_str(profile.get("location")),
            product=_as_str(profile.get("product")),
            use_case=_as_str(profile.get("useCase")),
            last_funding=_as_str(profile.get("lastFunding")),
        ),
        stability_score=StabilityScore(
            score=_as_int(score.get("score")),
            risk_level=_as_enum(RiskLevel, score.get("riskLevel"), RiskLevel.HIGH),
            verdict=_as_enum(Verdict, score.get("verdict"), Verdict.CAUTION),
        ),
        pillars=tuple(_parse_pillar(p) for p in _records(report.get("pillars"))),
        career_impact=CareerImpact(
            learning=rating("learning"),
            brand=rating("brand"),
            wlb=rating("wlb"),
            job_security=rating("jobSecurity"),
            comp_upside=rating("compUpside"),
            visa_safety=rating("visaSafety"),
        ),
        summary=ReportSummary(
            upside=_as_str(summary.get("upside")),
            red_flags=_as_str(summary.get("redFlags")),
            unknowns=_as_str(summary.get("unknowns")),
            guardian_take=_as_str(summary.get("guardianTake")),
        ),
        transparency=Transparency(
            penalty=_as_float(transparency.get("penalty")),
            missing_data=tuple(_as_str(m) for m in _as_list(transparency.get("missingData"))),
        ),
        visa_safety=VisaSafety(
            h1b_sponsor=_as_str(visa.get("h1bSponsor"), "Unsure"),
            green_card=_as_str(visa.get("greenCard"), "Unsure"),
            e_verify=_as_str(visa.get("eVerify"), "Unsure"),
        ),
        recommended_reads=tuple(
            RecommendedRead(
                title=_as_str(r.get("title")),
                uri=_as_str(r.get("uri")),
                source=_as_str(r.get("source")),
                summary=_as_str(r.get("summary")),
            )
            for r in _records(report.get("recommendedReads"))
        ),
        sources=sources,
    )


# -- Battle ------------------------------------------------------------------


def parse_battle(
    comparison: Mapping[str, Any], sources: tuple[Source, ...] = ()
) -> ComparisonReport:
    """Project a ``comparison`` payload into a :class:`ComparisonReport`."""
    companies = tuple(_as_str(c) for c in _as_list(comparison.get("companies")))
    rows: list[ComparisonRow] = []
    for raw in _records(comparison.get("rows")):
        winner = _as_str(raw.get("winner"), TIE) or TIE
        values = {
            str(name): _as_str(value)
            for name, value in _as_dict(raw.get("companyValues")).items()
        }
        if winner != TIE and winner not in values:
            logger.debug(
                "Row %r names winner %r with no value in the row",
                raw.get("feature"),
                winner,
            )
        rows.append(
            ComparisonRow(
                feature=_as_str(raw.get("feature")),
                company_values=values,
                winner=winner,
            )
        )
    return ComparisonReport(
        companies=companies,
        rows=tuple(rows),
        guardian_verdict=_as_str(comparison.get("guardianVerdict")),
        sources=sources,
    )


# -- Ambiguous ---------------------------------------------------------------


def parse_ambiguous(payload: Mapping[str, Any], query: str = "") -> AmbiguityResponse:
    options = tuple(_as_str(o) for o in _as_list(payload.get("ambiguousOptions")))
    return AmbiguityResponse(options=options, original_query=query)


# -- Parser ------------------------------------------------------------------


class ResponseParser:
    """Extracts, classifies and types the model's reply.

    Stateless; a single instance may be shared across acquisitions.
    """

    def parse(
        self,
        raw_text: str,
        grounding_chunks: Iterable[Any] | None = None,
        query: str = "",
    ) -> ReportResult:
        """Parse *raw_text* into a report variant.

        Parameters
        ----------
        raw_text:
            The model's text reply, possibly fenced or wrapped in prose.
        grounding_chunks:
            Backend citations in ``{"web": {"uri", "title"}}`` shape.
        query:
            The user's original query, echoed in ambiguous results.

        Raises
        ------
        MalformedResponseError
            If no JSON object can be decoded.
        """
        try:
            payload = extract_json_object(raw_text)
        except MalformedResponseError as exc:
            exc.query = query
            raise
        return self.classify(payload, grounding_chunks, query)

    def classify(
        self,
        payload: Mapping[str, Any],
        grounding_chunks: Iterable[Any] | None = None,
        query: str = "",
    ) -> ReportResult:
        """Pick the variant for an already-decoded *payload*."""
        mode = payload.get("mode")

        if mode == "ambiguous" or payload.get("isAmbiguous"):
            return parse_ambiguous(payload, query)

        sources = extract_sources(grounding_chunks)
        if mode == "battle":
            return parse_battle(_as_dict(payload.get("comparison")), sources)

        # A missing or unknown tag falls back to the single report so that
        # payloads persisted before tagging still load.
        # TODO: drop the fallback once no v3 cache record can lack "mode".
        if mode != "single":
            logger.debug("Payload mode %r treated as single report", mode)
        return parse_single(_as_dict(payload.get("report")), sources)
