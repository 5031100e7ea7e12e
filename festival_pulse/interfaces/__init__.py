"""Abstract contracts between the sync services and their collaborators.

- ``IEventSource``   -- paginated listing source (RA GraphQL)
- ``IFestivalStore`` -- catalog and scrape-log persistence (SQLite)
"""

from festival_pulse.interfaces.event_source import IEventSource
from festival_pulse.interfaces.festival_store import IFestivalStore

__all__ = ["IEventSource", "IFestivalStore"]
