import math
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from contract_graph.graph.memory_store import InMemoryGraphStore
from contract_graph.models import (
    ContractContent,
    ContractFile,
    Dependency,
    DependencyEdge,
    DependencyPart,
    GraphModule,
    Part,
)
from contract_graph.utils.fingerprint import content_fingerprint


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_content(
    module_id: str = "users",
    parts: list[tuple[str, str]] | None = None,
    dependencies: list[tuple[str, list[tuple[str, str]]]] | None = None,
    description: str | None = None,
    category: str = "domain",
    type: str = "service",
) -> ContractContent:
    return ContractContent(
        id=module_id,
        type=type,
        category=category,
        description=description or f"The {module_id} module",
        parts=[Part(id=pid, type=ptype) for pid, ptype in (parts or [])],
        dependencies=[
            Dependency(
                module_id=dep_id,
                parts=[DependencyPart(part_id=pid, type=ptype) for pid, ptype in dep_parts],
            )
            for dep_id, dep_parts in (dependencies or [])
        ],
    )


def make_contract(
    module_id: str = "users",
    file_path: str | None = None,
    **kwargs,
) -> ContractFile:
    path = file_path or f"/contracts/{module_id}.yml"
    return ContractFile(
        file_name=Path(path).name,
        file_path=path,
        content=make_content(module_id, **kwargs),
    )


def make_module(
    module_id: str = "users",
    file_path: str | None = None,
    **kwargs,
) -> GraphModule:
    """Graph module as an apply of make_contract() with the same args would persist it."""
    path = file_path or f"/contracts/{module_id}.yml"
    content = make_content(module_id, **kwargs)
    return GraphModule(
        id=content.id,
        category=content.category,
        type=content.type,
        description=content.description,
        parts=list(content.parts),
        dependencies=[
            DependencyEdge(module_id=d.module_id, parts=list(d.parts))
            for d in content.dependencies
        ],
        source_path=path,
        content_hash=content_fingerprint(content),
    )


def write_contract(directory: Path, file_name: str, data) -> Path:
    """Write ``data`` as YAML (or raw text when a str) and return the path."""
    path = directory / file_name
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        path.write_text(data, encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def contract_data(module_id: str, parts=None, dependencies=None, **overrides) -> dict:
    data = {
        "id": module_id,
        "type": "service",
        "category": "domain",
        "description": f"The {module_id} module",
        "parts": [{"id": pid, "type": ptype} for pid, ptype in (parts or [])],
        "dependencies": [
            {
                "module_id": dep_id,
                "parts": [{"part_id": pid, "type": ptype} for pid, ptype in dep_parts],
            }
            for dep_id, dep_parts in (dependencies or [])
        ],
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store():
    return InMemoryGraphStore()


@pytest.fixture
def contracts_dir(tmp_path):
    """Directory with two valid contracts: orders depends on users."""
    directory = tmp_path / "contracts"
    write_contract(directory, "users.yml", contract_data(
        "users", parts=[("getUser", "function"), ("User", "class")],
    ))
    write_contract(directory, "orders.yml", contract_data(
        "orders",
        parts=[("placeOrder", "function")],
        dependencies=[("users", [("getUser", "function")])],
    ))
    return directory


@pytest.fixture
def contracts_pattern(contracts_dir):
    return str(contracts_dir / "**" / "*.yml")


def _make_vector(base_value: float, dim: int = 8) -> list[float]:
    """Create a normalized vector with a distinctive pattern."""
    vec = [base_value + (i % 4) * (1.0 - base_value) * 0.3 for i in range(dim)]
    magnitude = math.sqrt(sum(x * x for x in vec))
    return [x / magnitude for x in vec]


# Engineered vectors for deterministic similarity tests
AUTH_VECTOR = [1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
BILLING_VECTOR = [0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
OTHER_VECTOR = _make_vector(0.5)
QUERY_AUTH_VECTOR = [0.95, 0.05, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]  # Very close to AUTH_VECTOR


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client that returns engineered vectors based on input text."""
    def create_embeddings(**kwargs):
        texts = kwargs.get("input", [])

        embeddings = []
        for i, text in enumerate(texts):
            text_lower = text.lower()
            if "login" in text_lower:
                vec = QUERY_AUTH_VECTOR
            elif any(kw in text_lower for kw in ["auth", "session", "password"]):
                vec = AUTH_VECTOR
            elif any(kw in text_lower for kw in ["invoice", "billing", "payment"]):
                vec = BILLING_VECTOR
            else:
                vec = OTHER_VECTOR

            embedding_obj = MagicMock()
            embedding_obj.embedding = vec
            embedding_obj.index = i
            embeddings.append(embedding_obj)

        response = MagicMock()
        response.data = embeddings
        return response

    mock_client = MagicMock()
    mock_client.embeddings.create = MagicMock(side_effect=create_embeddings)
    return mock_client


@pytest.fixture
def chroma_temp_dir(tmp_path):
    return str(tmp_path / "chroma_test")
