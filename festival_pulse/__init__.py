"""Festival Pulse: syncs Resident Advisor festival listings into a catalog store."""

__version__ = "0.1.0"
