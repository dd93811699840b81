"""Shared fixtures for the startup-guardian test suite."""

from __future__ import annotations

import json

import pytest

from startup_guardian.domain.enums import RiskLevel, StatusColor, Verdict
from startup_guardian.domain.values import (
    CompanyProfile,
    Pillar,
    SafetyReport,
    StabilityScore,
)
from startup_guardian.infrastructure.cache import MemoryStore, ReportCache
from tests.helpers.payloads import (
    DECLARED_WEIGHTS,
    FakeClock,
    ambiguous_payload,
    battle_payload,
    single_payload,
)

# ---------------------------------------------------------------------------
# Raw model replies
# ---------------------------------------------------------------------------


@pytest.fixture
def single_json() -> str:
    return json.dumps(single_payload())


@pytest.fixture
def battle_json() -> str:
    return json.dumps(battle_payload())


@pytest.fixture
def ambiguous_json() -> str:
    return json.dumps(ambiguous_payload())


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ai_score() -> StabilityScore:
    return StabilityScore(score=61, risk_level=RiskLevel.MEDIUM, verdict=Verdict.REASONABLE_BET)


@pytest.fixture
def sample_report(ai_score: StabilityScore) -> SafetyReport:
    """Ten pillars, declared weights summing to 100, mixed statuses."""
    statuses = [StatusColor.GREEN] * 5 + [StatusColor.YELLOW] * 3 + [StatusColor.RED] * 2
    pillars = tuple(
        Pillar(id=i + 1, title=f"P{i + 1}", weight=DECLARED_WEIGHTS[i], status=s)
        for i, s in enumerate(statuses)
    )
    return SafetyReport(
        profile=CompanyProfile(name="Acme"),
        stability_score=ai_score,
        pillars=pillars,
    )


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(memory_store: MemoryStore, clock: FakeClock) -> ReportCache:
    return ReportCache(memory_store, clock=clock)
