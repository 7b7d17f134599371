"""State definition for the LangGraph apply pipeline."""

import operator
from typing import Annotated, TypedDict

from contract_graph.models import (
    ApplyResult,
    ChangeReport,
    ContractDocument,
    ContractFile,
    ValidationSummary,
)


class ApplyState(TypedDict):
    """State for the load -> validate -> detect -> apply pipeline.

    ``errors`` accumulates across nodes; all other fields are overwritten.
    """

    # Input
    dry_run: bool

    # Registry snapshot
    documents: list[ContractDocument]
    contracts: list[ContractFile]

    # Results
    validation: ValidationSummary | None
    change_report: ChangeReport | None
    apply_result: ApplyResult | None

    # Error accumulation
    errors: Annotated[list[str], operator.add]


def make_initial_state(dry_run: bool = False) -> ApplyState:
    """Create the initial pipeline state.

    Args:
        dry_run: Stop after change detection without committing.

    Returns:
        ApplyState with all fields initialised to defaults.
    """
    return {
        "dry_run": dry_run,
        "documents": [],
        "contracts": [],
        "validation": None,
        "change_report": None,
        "apply_result": None,
        "errors": [],
    }
