"""Sync services: entity resolution, reconciliation, orchestration, dedup and
curated ingestion."""
