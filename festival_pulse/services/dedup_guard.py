"""Name-based existence check for festivals that arrive without an external id.

Curated and secondary-source events have no RA id, so their slug alone is a
weak identity.  :class:`FuzzyDedupGuard` treats a candidate as a duplicate
when either

1. a festival with exactly the candidate's slug exists, or
2. the configured :class:`SimilarityPolicy` matches the candidate name
   against any stored festival name.

The similarity step is a heuristic.  The default prefix policy flags
unrelated events that share a long common prefix and misses renamed events;
both are accepted.  Policies are swappable so a better matcher can replace it
without touching the exact-slug path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from festival_pulse.interfaces.festival_store import IFestivalStore
from festival_pulse.models.catalog import Festival
from festival_pulse.utils.errors import ConfigurationError
from festival_pulse.utils.logging import get_logger
from festival_pulse.utils.text_normalizer import prefix_contained, slugify, token_similarity


class SimilarityPolicy(ABC):
    """Decides whether a candidate name refers to an existing festival name."""

    @abstractmethod
    def matches(self, candidate: str, existing: str) -> bool:
        """Return ``True`` when *candidate* should be treated as *existing*."""

    @abstractmethod
    def get_policy_name(self) -> str:
        """Return a short identifier used in logs."""


class PrefixContainmentPolicy(SimilarityPolicy):
    """Case-insensitive containment of the candidate's first N characters."""

    def __init__(self, prefix_length: int = 20) -> None:
        if prefix_length < 1:
            raise ValueError("prefix_length must be positive")
        self._prefix_length = prefix_length

    def matches(self, candidate: str, existing: str) -> bool:
        return prefix_contained(candidate, existing, self._prefix_length)

    def get_policy_name(self) -> str:
        return f"prefix_{self._prefix_length}"


class TokenSimilarityPolicy(SimilarityPolicy):
    """rapidfuzz token-sort similarity at or above a 0-1 threshold."""

    def __init__(self, threshold: float = 0.9) -> None:
        if not 0.0 < threshold <= 1.0:
            raise ValueError("threshold must be in (0, 1]")
        self._threshold = threshold

    def matches(self, candidate: str, existing: str) -> bool:
        return token_similarity(candidate, existing) >= self._threshold

    def get_policy_name(self) -> str:
        return f"token_{self._threshold:.2f}"


def build_policy(
    name: str,
    prefix_length: int = 20,
    threshold: float = 0.9,
) -> SimilarityPolicy:
    """Build a policy from its settings name (``"prefix"`` or ``"token"``)."""
    if name == "prefix":
        return PrefixContainmentPolicy(prefix_length)
    if name == "token":
        return TokenSimilarityPolicy(threshold)
    raise ConfigurationError(f"Unknown dedup policy '{name}' (expected 'prefix' or 'token')")


class FuzzyDedupGuard:
    """Existence check used before inserting festivals without an external id."""

    def __init__(
        self,
        store: IFestivalStore,
        policy: SimilarityPolicy | None = None,
    ) -> None:
        self._store = store
        self._policy = policy or PrefixContainmentPolicy()
        self._logger = get_logger(__name__)

    async def find_duplicate(self, name: str, slug: str | None = None) -> Festival | None:
        """Return the festival *name* duplicates, or ``None``.

        *slug* defaults to ``slugify(name)``.
        """
        candidate_slug = slug or slugify(name)
        if candidate_slug:
            exact = await self._store.find_festival_by_slug(candidate_slug)
            if exact is not None:
                self._logger.debug("dedup_slug_hit", name=name, slug=candidate_slug)
                return exact

        for festival in await self._store.list_festivals():
            if self._policy.matches(name, festival.name):
                self._logger.info(
                    "dedup_similarity_hit",
                    name=name,
                    existing=festival.name,
                    policy=self._policy.get_policy_name(),
                )
                return festival
        return None

    async def is_duplicate(self, name: str, slug: str | None = None) -> bool:
        """``True`` means "skip the insert"."""
        return await self.find_duplicate(name, slug) is not None
