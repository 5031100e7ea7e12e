"""Utility modules for Festival Pulse.

- **errors** -- Domain exception hierarchy rooted at FestivalPulseError.
- **logging** -- structlog configuration (console locally, JSON when
  ``APP_ENV=production``) and the ``get_logger`` helper.
- **text_normalizer** -- The shared ``slugify`` implementation and the name
  similarity helpers used by the dedup policies.
"""

from festival_pulse.utils.errors import (
    ConfigurationError,
    EntityResolutionError,
    EventSourceError,
    FestivalPulseError,
    StoreError,
)
from festival_pulse.utils.logging import configure_logging, get_logger, wants_json
from festival_pulse.utils.text_normalizer import slugify

__all__ = [
    "ConfigurationError",
    "EntityResolutionError",
    "EventSourceError",
    "FestivalPulseError",
    "StoreError",
    "configure_logging",
    "get_logger",
    "slugify",
    "wants_json",
]
