"""Custom exception hierarchy for Festival Pulse.

All application exceptions inherit from :class:`FestivalPulseError`, which
carries an optional ``provider_name`` so log output can identify which
collaborator (e.g. "ra_graphql", "sqlite_festival_store") caused the failure.

    FestivalPulseError  (base -- catch-all for any Festival Pulse error)
    +-- EventSourceError       (listing fetch: transport or payload failure)
    +-- StoreError             (relational store read/write failure)
    +-- EntityResolutionError  (a name that cannot produce an identity key)
    +-- ConfigurationError     (unknown region, unreadable catalog, bad settings)

Expected "not found" outcomes are never raised; lookups return ``None``.
"""


class FestivalPulseError(Exception):
    """Base exception for all Festival Pulse errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[ra_graphql] Request failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class EventSourceError(FestivalPulseError):
    """Raised when the events API is unreachable or returns an unreadable body.

    Non-success HTTP statuses are not raised; the client logs them and ends
    pagination early.  The sync orchestrator catches this error per region.
    """

    def __init__(
        self,
        message: str = "Event source request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EntityResolutionError(FestivalPulseError):
    """Raised when a listing field cannot be turned into an identity key."""

    def __init__(
        self,
        message: str = "Entity key could not be derived",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class StoreError(FestivalPulseError):
    """Raised when a store read or write fails."""

    def __init__(
        self,
        message: str = "Store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(FestivalPulseError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
