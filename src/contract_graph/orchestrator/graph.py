"""LangGraph pipeline that validates contracts and applies their diff.

Contract errors (SourceUnavailableError, ApplyConflictError) are not caught
by the nodes: they propagate out of ``invoke`` so the caller can tell them
apart. Invalid contracts are routed to ``abort_node`` instead.
"""

import logging
from typing import Callable

from langgraph.graph import END, START, StateGraph

from contract_graph.orchestrator.exceptions import GraphBuildError
from contract_graph.orchestrator.state import ApplyState
from contract_graph.reconcile.apply_coordinator import ApplyCoordinator
from contract_graph.reconcile.change_detector import ChangeDetector
from contract_graph.reconcile.validation_aggregator import validate_contracts
from contract_graph.registry.loader import ContractRegistry, to_contract_file
from contract_graph.registry.validator import ContractValidator

logger = logging.getLogger(__name__)

# Abort detection prefix, matched by the CLI
ABORT_PREFIX = "ABORT:"


def make_load_node(registry: ContractRegistry) -> Callable[[ApplyState], dict]:
    """Factory: returns a node closure that scans the registry once.

    Both raw documents (for validation) and schema-valid contracts (for
    detection and apply) come from the same scan.
    """

    def load_node(state: ApplyState) -> dict:
        documents = registry.scan()
        contracts = [c for c in (to_contract_file(d) for d in documents) if c is not None]
        return {"documents": documents, "contracts": contracts}

    return load_node


def make_validate_node(validator: ContractValidator) -> Callable[[ApplyState], dict]:
    """Factory: returns a node closure that validates the scanned documents."""

    def validate_node(state: ApplyState) -> dict:
        summary = validate_contracts(state["documents"], validator)
        return {"validation": summary}

    return validate_node


def make_detect_node(detector: ChangeDetector) -> Callable[[ApplyState], dict]:
    """Factory: returns a node closure that computes the change report."""

    def detect_node(state: ApplyState) -> dict:
        return {"change_report": detector.detect(state["contracts"])}

    return detect_node


def make_apply_node(coordinator: ApplyCoordinator) -> Callable[[ApplyState], dict]:
    """Factory: returns a node closure that commits the detected changes."""

    def apply_node(state: ApplyState) -> dict:
        report = state["change_report"]
        result = coordinator.apply(report.changes, state["contracts"])
        return {"apply_result": result}

    return apply_node


def abort_node(state: ApplyState) -> dict:
    """Write a diagnostic abort summary to the errors list."""
    summary = state["validation"]
    invalid = [f.file_name for f in summary.files if not f.valid] if summary else []
    message = (
        f"{ABORT_PREFIX} contract validation failed. Cannot apply invalid contracts. "
        f"Invalid files ({len(invalid)}): {', '.join(invalid) or 'none'}."
    )
    logger.warning(message)
    return {"errors": [message]}


def route_after_validate(state: ApplyState) -> str:
    """Router: "detect" when every file is valid, "abort" otherwise."""
    summary = state["validation"]
    if summary is not None and summary.valid:
        return "detect"
    return "abort"


def route_after_detect(state: ApplyState) -> str:
    """Router: "apply" when there are changes and this is not a dry run."""
    report = state["change_report"]
    if report is None or not report.has_changes or state["dry_run"]:
        return "done"
    return "apply"


def build_graph(
    registry: ContractRegistry,
    validator: ContractValidator,
    detector: ChangeDetector,
    coordinator: ApplyCoordinator,
):
    """Build and compile the apply pipeline.

    Edge topology:
      START -> load_node -> validate_node
      validate_node -> conditional(route_after_validate) -> {detect_node, abort_node}
      detect_node -> conditional(route_after_detect) -> {apply_node, END}
      apply_node -> END
      abort_node -> END

    Returns:
        CompiledStateGraph ready to invoke.

    Raises:
        GraphBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(ApplyState)

        graph.add_node("load_node", make_load_node(registry))
        graph.add_node("validate_node", make_validate_node(validator))
        graph.add_node("detect_node", make_detect_node(detector))
        graph.add_node("apply_node", make_apply_node(coordinator))
        graph.add_node("abort_node", abort_node)

        graph.add_edge(START, "load_node")
        graph.add_edge("load_node", "validate_node")
        graph.add_conditional_edges(
            "validate_node",
            route_after_validate,
            {"detect": "detect_node", "abort": "abort_node"},
        )
        graph.add_conditional_edges(
            "detect_node",
            route_after_detect,
            {"apply": "apply_node", "done": END},
        )
        graph.add_edge("apply_node", END)
        graph.add_edge("abort_node", END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build apply pipeline: {exc}") from exc
