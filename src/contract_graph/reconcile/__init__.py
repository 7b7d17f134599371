"""Change detection, relation assembly, validation rollup and apply."""

from contract_graph.reconcile.apply_coordinator import ApplyCoordinator, to_graph_module
from contract_graph.reconcile.change_detector import (
    ChangeDetector,
    detect_changes,
    find_module_id_conflicts,
)
from contract_graph.reconcile.relation_assembler import (
    assemble_relations,
    find_dangling_edges,
    get_module_detail,
    get_relations,
)
from contract_graph.reconcile.snapshot import read_graph_snapshot
from contract_graph.reconcile.validation_aggregator import aggregate, validate_contracts

__all__ = [
    "ApplyCoordinator",
    "ChangeDetector",
    "aggregate",
    "assemble_relations",
    "detect_changes",
    "find_dangling_edges",
    "find_module_id_conflicts",
    "get_module_detail",
    "get_relations",
    "read_graph_snapshot",
    "to_graph_module",
    "validate_contracts",
]
