"""Payload builders and test doubles shared across the test suite."""

from __future__ import annotations

import json
from typing import Any

from startup_guardian.domain.enums import StatusColor
from startup_guardian.domain.values import Pillar
from startup_guardian.infrastructure.llm import BackendReply, ModelBackend

DECLARED_WEIGHTS = ["25%", "10%", "10%", "5%", "10%", "7%", "5%", "8%", "10%", "10%"]


def pillar_payload(pillar_id: int, status: str = "Green", weight: str = "10%") -> dict[str, Any]:
    return {
        "id": pillar_id,
        "title": f"Pillar {pillar_id}",
        "weight": weight,
        "status": status,
        "summary": f"Summary {pillar_id}",
        "details": {"First": "one", "Second": "two"},
    }


def single_payload(statuses: list[str] | None = None) -> dict[str, Any]:
    statuses = statuses or ["Green"] * 10
    pillars = [
        pillar_payload(i + 1, status, DECLARED_WEIGHTS[i])
        for i, status in enumerate(statuses)
    ]
    pillars[0]["revenueData"] = [{"year": "2022", "revenue": 12.5}, {"year": "2023", "revenue": 30}]
    pillars[5]["founderSocials"] = [{"platform": "LinkedIn", "uri": "https://linkedin.com/in/f"}]
    pillars[5]["founderContent"] = [{"title": "Talk", "uri": "https://yt/x", "source": "YouTube"}]
    pillars[6]["userBaseData"] = [{"year": "2023", "users": 1000000}]
    return {
        "mode": "single",
        "report": {
            "companyProfile": {
                "name": "Stripe",
                "founded": "2010",
                "location": "San Francisco, USA",
                "product": "Payments infrastructure for the internet.",
                "useCase": "Online payments",
                "lastFunding": "Mar 2023 - $6.5B - Series I",
            },
            "stabilityScore": {"score": 88, "riskLevel": "Low", "verdict": "Strong Buy"},
            "careerImpact": {
                "learning": "High",
                "brand": "High",
                "wlb": "Med",
                "jobSecurity": "High",
                "compUpside": "Med",
                "visaSafety": "High",
            },
            "summary": {
                "upside": "Profitable",
                "redFlags": "Late-stage equity",
                "unknowns": "IPO timing",
                "guardianTake": "Safe bet.",
            },
            "recommendedReads": [
                {"title": "CEO interview", "uri": "https://r/1", "source": "Podcast", "summary": "Why"}
            ],
            "pillars": pillars,
            "transparency": {"penalty": 2, "missingData": ["Burn rate"]},
            "visaSafety": {"h1bSponsor": "Yes", "greenCard": "Yes", "eVerify": "Unsure"},
        },
    }


def battle_payload() -> dict[str, Any]:
    return {
        "mode": "battle",
        "comparison": {
            "companies": ["Ramp", "Brex"],
            "rows": [
                {
                    "feature": "Money Left",
                    "companyValues": {"Ramp": "Profitable", "Brex": "24 mo runway"},
                    "winner": "Ramp",
                },
                {
                    "feature": "WLB",
                    "companyValues": {"Ramp": "Intense", "Brex": "Intense"},
                    "winner": "Tie",
                },
            ],
            "guardianVerdict": "Ramp edges it.",
        },
    }


def ambiguous_payload() -> dict[str, Any]:
    return {
        "mode": "ambiguous",
        "isAmbiguous": True,
        "ambiguousOptions": ["Mercury (bank)", "Mercury (insurance)"],
    }


GROUNDING_CHUNKS = [
    {"web": {"uri": "https://a.example", "title": "A"}},
    {"web": {"uri": "https://b.example"}},
    {"web": {"title": "C only"}},
    {"retrievedContext": {"uri": "x"}},
    {"web": {"uri": "https://d.example", "title": "D"}},
]


def make_pillars(
    statuses: list[StatusColor], weight: str = "10%"
) -> tuple[Pillar, ...]:
    return tuple(
        Pillar(id=i + 1, title=f"P{i + 1}", weight=weight, status=s)
        for i, s in enumerate(statuses)
    )


class FakeClock:
    """Settable epoch-millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class ScriptedBackend(ModelBackend):
    """Backend returning canned replies and counting calls."""

    def __init__(
        self,
        text: str | dict[str, Any] = "",
        citations: tuple[dict[str, Any], ...] = (),
        error: Exception | None = None,
    ) -> None:
        self.text = text if isinstance(text, str) else json.dumps(text)
        self.citations = citations
        self.error = error
        self.calls: list[str] = []

    @property
    def backend_name(self) -> str:
        return "scripted"

    async def generate(self, query: str) -> BackendReply:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return BackendReply(text=self.text, citations=self.citations)
