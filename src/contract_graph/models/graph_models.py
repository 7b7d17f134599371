"""Models for the persisted module graph and relation views."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from contract_graph.models.contract_models import DependencyPart, Part


class DependencyEdge(BaseModel):
    """``module_id`` and the parts involved in one dependency.

    On an outgoing edge the parts belong to ``module_id``; on an incoming edge
    they belong to the subject module.
    """

    model_config = ConfigDict(frozen=True)

    module_id: str
    parts: list[DependencyPart] = Field(default_factory=list)


class GraphModule(BaseModel):
    """Persisted counterpart of a contract, as written by the last apply."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    type: str
    description: str
    parts: list[Part] = Field(default_factory=list)
    dependencies: list[DependencyEdge] = Field(default_factory=list)
    source_path: str  # file path the module was applied from
    content_hash: str  # fingerprint of the applied content


class RelationView(BaseModel):
    model_config = ConfigDict(frozen=False)

    module_id: str
    outgoing: list[DependencyEdge] = Field(default_factory=list)
    incoming: list[DependencyEdge] = Field(default_factory=list)


class GraphChange(BaseModel):
    """A single write against the graph with its optimistic precondition."""

    model_config = ConfigDict(frozen=True)

    action: Literal["upsert", "delete"]
    file_path: str
    module: Optional[GraphModule] = None  # required for upsert
    expected_hash: Optional[str] = None  # None means the path must be absent


class GraphCommit(BaseModel):
    model_config = ConfigDict(frozen=False)

    revision: int
    applied: int = 0
