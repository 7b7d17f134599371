"""Persisted module graph access."""

from contract_graph.graph.json_store import JsonGraphStore
from contract_graph.graph.memory_store import InMemoryGraphStore
from contract_graph.graph.store import GraphStore, apply_changes

__all__ = [
    "GraphStore",
    "InMemoryGraphStore",
    "JsonGraphStore",
    "apply_changes",
]
