"""Outgoing/incoming dependency views over the persisted graph."""

from typing import Sequence

from contract_graph.graph.store import GraphStore
from contract_graph.models.graph_models import DependencyEdge, GraphModule, RelationView
from contract_graph.reconcile.snapshot import read_graph_snapshot


def assemble_relations(module_id: str, modules: Sequence[GraphModule]) -> RelationView:
    """Build the relation view of ``module_id`` from a graph snapshot.

    Outgoing edges are the subject's persisted dependencies. Incoming edges
    come from every module whose persisted dependencies name the subject.
    Edges are reported exactly as stored, asymmetric or not.

    Returns:
        RelationView; both sides empty when the module is not in the graph.
    """
    subject = next((m for m in modules if m.id == module_id), None)
    if subject is None:
        return RelationView(module_id=module_id)

    outgoing = [
        DependencyEdge(module_id=dep.module_id, parts=list(dep.parts))
        for dep in subject.dependencies
    ]

    incoming: list[DependencyEdge] = []
    for module in modules:
        for dep in module.dependencies:
            if dep.module_id == module_id:
                incoming.append(DependencyEdge(module_id=module.id, parts=list(dep.parts)))

    return RelationView(module_id=module_id, outgoing=outgoing, incoming=incoming)


def get_relations(module_id: str, store: GraphStore) -> RelationView:
    """Relation view for ``module_id`` against the live store."""
    return assemble_relations(module_id, read_graph_snapshot(store))


def get_module_detail(module_id: str, store: GraphStore) -> GraphModule:
    """Persisted module by id.

    Raises:
        GraphModuleNotFoundError: If the module is not in the graph.
    """
    return store.get_module(module_id)


def find_dangling_edges(modules: Sequence[GraphModule]) -> list[tuple[str, str]]:
    """(from, to) dependency pairs whose target module is not in the graph."""
    known = {module.id for module in modules}
    return [
        (module.id, dep.module_id)
        for module in modules
        for dep in module.dependencies
        if dep.module_id not in known
    ]
