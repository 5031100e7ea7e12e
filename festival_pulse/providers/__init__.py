"""Concrete adapters behind the ``festival_pulse.interfaces`` contracts."""
