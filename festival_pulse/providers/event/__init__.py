"""Event listing sources."""

from festival_pulse.providers.event.ra_graphql_provider import (
    RA_AREA_IDS,
    REGION_DISPLAY_NAMES,
    RAGraphQLProvider,
    resolve_area_id,
)

__all__ = ["RA_AREA_IDS", "REGION_DISPLAY_NAMES", "RAGraphQLProvider", "resolve_area_id"]
