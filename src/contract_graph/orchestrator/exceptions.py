"""Exceptions for orchestrator operations."""

from contract_graph.exceptions import ContractGraphError


class OrchestratorError(ContractGraphError):
    """Base exception for all orchestrator operations."""


class GraphBuildError(OrchestratorError):
    """Raised when graph construction fails."""
