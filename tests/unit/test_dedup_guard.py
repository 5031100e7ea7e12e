"""Unit tests for the fuzzy dedup guard and its similarity policies."""

from __future__ import annotations

import pytest

from festival_pulse.models.catalog import Festival
from festival_pulse.services.dedup_guard import (
    FuzzyDedupGuard,
    PrefixContainmentPolicy,
    TokenSimilarityPolicy,
    build_policy,
)
from festival_pulse.utils.errors import ConfigurationError


class TestPolicies:
    def test_prefix_policy(self) -> None:
        policy = PrefixContainmentPolicy(prefix_length=20)
        assert policy.matches("Envision Festival", "Envision Festival 2026")
        assert not policy.matches("Ultra Costa Rica", "Envision Festival 2026")
        assert policy.get_policy_name() == "prefix_20"

    def test_prefix_policy_rejects_non_positive_length(self) -> None:
        with pytest.raises(ValueError):
            PrefixContainmentPolicy(prefix_length=0)

    def test_token_policy(self) -> None:
        policy = TokenSimilarityPolicy(threshold=0.9)
        assert policy.matches("Festival Envision", "Envision Festival")
        assert not policy.matches("Tardeo Sunset Party", "Envision Festival")

    def test_token_policy_threshold_bounds(self) -> None:
        with pytest.raises(ValueError):
            TokenSimilarityPolicy(threshold=0.0)
        with pytest.raises(ValueError):
            TokenSimilarityPolicy(threshold=1.5)

    def test_build_policy(self) -> None:
        assert isinstance(build_policy("prefix"), PrefixContainmentPolicy)
        assert isinstance(build_policy("token", threshold=0.8), TokenSimilarityPolicy)

    def test_build_policy_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown dedup policy"):
            build_policy("levenshtein")


class TestFuzzyDedupGuard:
    @pytest.mark.asyncio
    async def test_exact_slug_hit(self, store) -> None:
        existing = await store.insert_festival(
            Festival(name="Tardeo Sunset Party", slug="tardeo-sunset-party-2026")
        )
        guard = FuzzyDedupGuard(store)
        found = await guard.find_duplicate("Something Else Entirely", "tardeo-sunset-party-2026")
        assert found is not None
        assert found.id == existing.id

    @pytest.mark.asyncio
    async def test_prefix_hit_against_api_slug(self, store) -> None:
        # API rows carry the RA id in the slug, so only the name match finds them.
        await store.insert_festival(Festival(name="Envision Festival 2026", slug="envision-festival-2026-123"))
        guard = FuzzyDedupGuard(store)
        assert await guard.is_duplicate("Envision Festival")

    @pytest.mark.asyncio
    async def test_no_match(self, store) -> None:
        await store.insert_festival(Festival(name="Envision Festival", slug="envision-festival-123"))
        guard = FuzzyDedupGuard(store)
        assert await guard.find_duplicate("Tardeo Sunset Party") is None
        assert not await guard.is_duplicate("Tardeo Sunset Party")

    @pytest.mark.asyncio
    async def test_empty_store(self, store) -> None:
        assert await FuzzyDedupGuard(store).find_duplicate("Anything") is None

    @pytest.mark.asyncio
    async def test_token_policy_catches_reordering(self, store) -> None:
        await store.insert_festival(Festival(name="Envision Festival", slug="envision-festival-123"))
        prefix_guard = FuzzyDedupGuard(store, PrefixContainmentPolicy())
        token_guard = FuzzyDedupGuard(store, TokenSimilarityPolicy(0.9))
        assert not await prefix_guard.is_duplicate("Festival Envision")
        assert await token_guard.is_duplicate("Festival Envision")
