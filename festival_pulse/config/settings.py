"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, in priority order:

  1. Environment variables, e.g. ``SYNC_REGIONS='["costa_rica","berlin"]'``
  2. A ``.env`` file in the working directory

Field ``ra_page_delay`` maps to env var ``RA_PAGE_DELAY`` and so on.  Defaults
apply when neither source sets a value.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Festival Pulse settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Store ===
    db_path: str = "data/festival_pulse.db"

    # === Resident Advisor GraphQL ===
    ra_graphql_url: str = "https://ra.co/graphql"
    ra_page_size: int = Field(default=20, ge=1, le=100)
    ra_page_delay: float = Field(default=1.5, ge=0.0)  # seconds between pages
    ra_request_timeout: float = 30.0

    # === Sync window ===
    sync_regions: list[str] = Field(default_factory=lambda: ["costa_rica"])
    sync_window_months: int = Field(default=3, ge=1)

    # === Dedup guard (curated ingestion) ===
    # "prefix" = first-N-characters containment, "token" = rapidfuzz similarity.
    dedup_policy: str = "prefix"
    dedup_prefix_length: int = Field(default=20, ge=1)
    dedup_similarity_threshold: float = Field(default=0.9, gt=0.0, le=1.0)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
