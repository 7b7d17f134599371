"""Canonical rendering and hashing of module content.

Contract content (from the registry) and graph modules (from the store)
share the same structural fields, so both render through the same function.
"""

import hashlib
import json
from typing import Any, Union

from contract_graph.models.contract_models import ContractContent
from contract_graph.models.graph_models import GraphModule


def canonical_content(item: Union[ContractContent, GraphModule]) -> dict[str, Any]:
    """Return an order-insensitive rendering of a module's structure.

    Parts compare as a set of (id, type) pairs. Dependencies compare as a set
    of (module_id, part set) entries.

    Args:
        item: Contract content or persisted graph module.

    Returns:
        Dict with sorted, JSON-serializable values.
    """
    parts = sorted({(part.id, part.type) for part in item.parts})
    dependencies = sorted(
        {
            (dep.module_id, tuple(sorted({(p.part_id, p.type) for p in dep.parts})))
            for dep in item.dependencies
        }
    )
    return {
        "id": item.id,
        "type": item.type,
        "category": item.category,
        "description": item.description,
        "parts": [list(p) for p in parts],
        "dependencies": [
            [module_id, [list(p) for p in dep_parts]]
            for module_id, dep_parts in dependencies
        ],
    }


def content_fingerprint(item: Union[ContractContent, GraphModule]) -> str:
    """SHA256 of the canonical rendering. Equal fingerprints mean identical content."""
    payload = json.dumps(canonical_content(item), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def file_hash(text: str) -> str:
    """SHA256 of raw file text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
