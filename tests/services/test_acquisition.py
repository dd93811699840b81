"""Tests for ReportAcquisitionOrchestrator."""

from __future__ import annotations

import json

import pytest

from startup_guardian.domain.exceptions import (
    BackendUnavailableError,
    MalformedResponseError,
)
from startup_guardian.domain.values import (
    AmbiguityResponse,
    ComparisonReport,
    SafetyReport,
)
from startup_guardian.infrastructure.cache import MemoryStore, ReportCache
from startup_guardian.infrastructure.llm.chat_backend import ChatModelBackend
from startup_guardian.services.acquisition import ReportAcquisitionOrchestrator
from startup_guardian.testing.mock_llm import MockChatModel
from tests.helpers.payloads import GROUNDING_CHUNKS, ScriptedBackend, single_payload


class _BrokenStore(MemoryStore):
    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")


class TestAcquire:
    @pytest.mark.asyncio
    async def test_miss_calls_backend_once_and_caches(
        self, cache: ReportCache, single_json: str
    ) -> None:
        backend = ScriptedBackend(single_json, citations=tuple(GROUNDING_CHUNKS))
        orchestrator = ReportAcquisitionOrchestrator(backend, cache)

        result = await orchestrator.acquire("  Stripe ")

        assert isinstance(result, SafetyReport)
        assert backend.calls == ["  Stripe "]
        assert cache.get("stripe") == result
        assert len(result.sources) == 2

    @pytest.mark.asyncio
    async def test_hit_skips_backend(self, cache: ReportCache, single_json: str) -> None:
        backend = ScriptedBackend(single_json)
        orchestrator = ReportAcquisitionOrchestrator(backend, cache)

        first = await orchestrator.acquire("Stripe")
        second = await orchestrator.acquire("STRIPE")

        assert first == second
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_no_cache_refreshes(self, cache: ReportCache, single_json: str) -> None:
        backend = ScriptedBackend(single_json)
        orchestrator = ReportAcquisitionOrchestrator(backend, cache)

        await orchestrator.acquire("Stripe")
        await orchestrator.acquire("Stripe", use_cache=False)

        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_battle_and_ambiguous_are_cached(
        self, cache: ReportCache, battle_json: str, ambiguous_json: str
    ) -> None:
        battle = ReportAcquisitionOrchestrator(ScriptedBackend(battle_json), cache)
        assert isinstance(await battle.acquire("Ramp vs Brex"), ComparisonReport)
        assert isinstance(cache.get("ramp vs brex"), ComparisonReport)

        ambiguous = ReportAcquisitionOrchestrator(ScriptedBackend(ambiguous_json), cache)
        result = await ambiguous.acquire("Mercury")
        assert isinstance(result, AmbiguityResponse)
        assert result.original_query == "Mercury"
        assert cache.get("mercury") == result

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, cache: ReportCache) -> None:
        backend = ScriptedBackend(error=BackendUnavailableError("offline", query="Stripe"))
        orchestrator = ReportAcquisitionOrchestrator(backend, cache)

        with pytest.raises(BackendUnavailableError, match="offline"):
            await orchestrator.acquire("Stripe")
        assert cache.get("stripe") is None

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, cache: ReportCache) -> None:
        backend = ScriptedBackend(error=RuntimeError("boom"))
        orchestrator = ReportAcquisitionOrchestrator(backend, cache)

        with pytest.raises(BackendUnavailableError) as info:
            await orchestrator.acquire("Stripe")
        assert info.value.query == "Stripe"
        assert isinstance(info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_malformed_reply_is_not_cached(
        self, cache: ReportCache, memory_store: MemoryStore
    ) -> None:
        orchestrator = ReportAcquisitionOrchestrator(
            ScriptedBackend("I could not find that company."), cache
        )
        with pytest.raises(MalformedResponseError) as info:
            await orchestrator.acquire("Nope Inc")
        assert info.value.query == "Nope Inc"
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_cache_write_failure_is_not_fatal(self, clock, single_json: str) -> None:
        cache = ReportCache(_BrokenStore(), clock=clock)
        backend = ScriptedBackend(single_json)
        orchestrator = ReportAcquisitionOrchestrator(backend, cache)

        result = await orchestrator.acquire("Stripe")

        assert isinstance(result, SafetyReport)
        await orchestrator.acquire("Stripe")
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_default_cache_is_in_memory(self, single_json: str) -> None:
        orchestrator = ReportAcquisitionOrchestrator(ScriptedBackend(single_json))
        await orchestrator.acquire("Stripe")
        assert orchestrator.cache.get("stripe") is not None


class TestAcquireWithChatModel:
    @pytest.mark.asyncio
    async def test_end_to_end_with_mock_model(self, cache: ReportCache) -> None:
        fenced = "Sure!\n```json\n" + json.dumps(single_payload()) + "\n```"
        model = MockChatModel(responses=[fenced], grounding_chunks=GROUNDING_CHUNKS)
        orchestrator = ReportAcquisitionOrchestrator(ChatModelBackend(model), cache)

        result = await orchestrator.acquire("Stripe")
        again = await orchestrator.acquire("stripe")

        assert isinstance(result, SafetyReport)
        assert [s.uri for s in result.sources] == ["https://a.example", "https://d.example"]
        assert again == result
        assert model.call_count == 1

    @pytest.mark.asyncio
    async def test_model_failure_surfaces(self, cache: ReportCache) -> None:
        model = MockChatModel(error=ConnectionError("network down"))
        orchestrator = ReportAcquisitionOrchestrator(ChatModelBackend(model), cache)

        with pytest.raises(BackendUnavailableError):
            await orchestrator.acquire("Stripe")


class TestAcquireNonFinite:
    @pytest.mark.asyncio
    async def test_overflowing_number_still_yields_report(self, cache: ReportCache) -> None:
        backend = ScriptedBackend('{"mode": "single", "report": {"stabilityScore": {"score": 1e999}}}')
        result = await ReportAcquisitionOrchestrator(backend, cache).acquire("Stripe")
        assert isinstance(result, SafetyReport)
        assert result.stability_score.score == 0

    @pytest.mark.asyncio
    async def test_nan_token_is_acquisition_error(self, cache: ReportCache) -> None:
        backend = ScriptedBackend('{"mode": "single", "report": {"stabilityScore": {"score": NaN}}}')
        with pytest.raises(MalformedResponseError):
            await ReportAcquisitionOrchestrator(backend, cache).acquire("Stripe")
