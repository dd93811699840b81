"""Tests for the versioned prompt contract."""

from __future__ import annotations

from startup_guardian.services.prompts import (
    CACHE_KEY_PREFIX,
    RESPONSE_SCHEMA,
    SCHEMA_VERSION,
    build_messages,
)


class TestPrompts:
    def test_messages_carry_query_and_schema(self) -> None:
        system, human = build_messages("Ramp vs Brex")
        assert system.type == "system"
        assert "Ramp vs Brex" in human.content
        assert f"schema v{SCHEMA_VERSION}" in human.content
        assert RESPONSE_SCHEMA in human.content

    def test_schema_lists_all_modes(self) -> None:
        for mode in ('"single"', '"battle"', '"isAmbiguous"'):
            assert mode in RESPONSE_SCHEMA

    def test_prefix_tracks_version(self) -> None:
        assert CACHE_KEY_PREFIX.endswith(f"v{SCHEMA_VERSION}_")
