"""Fake transports and catalog fixtures for fetcher tests (no live network)."""

from .catalogs import SAMPLE_CATALOG
from .transport import ManualTransport, ScriptedTransport

__all__ = ["ManualTransport", "SAMPLE_CATALOG", "ScriptedTransport"]
