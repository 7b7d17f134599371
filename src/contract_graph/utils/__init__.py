"""Utility helpers."""

from contract_graph.utils.fingerprint import canonical_content, content_fingerprint, file_hash
from contract_graph.utils.logging import configure_logging

__all__ = [
    "canonical_content",
    "configure_logging",
    "content_fingerprint",
    "file_hash",
]
