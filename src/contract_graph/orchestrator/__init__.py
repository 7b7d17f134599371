"""LangGraph apply pipeline."""

from contract_graph.orchestrator.exceptions import GraphBuildError, OrchestratorError
from contract_graph.orchestrator.graph import ABORT_PREFIX, build_graph
from contract_graph.orchestrator.state import ApplyState, make_initial_state

__all__ = [
    "ABORT_PREFIX",
    "ApplyState",
    "GraphBuildError",
    "OrchestratorError",
    "build_graph",
    "make_initial_state",
]
