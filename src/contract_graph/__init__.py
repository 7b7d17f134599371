"""Contract registry reconciliation against a persisted module graph."""

__version__ = "0.1.0"
