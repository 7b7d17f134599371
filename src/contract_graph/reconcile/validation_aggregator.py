"""Roll per-file validation outcomes into one summary."""

import logging
from typing import Sequence

from contract_graph.models.contract_models import ContractDocument
from contract_graph.models.report_models import ValidationOutcome, ValidationSummary
from contract_graph.registry.validator import ContractValidator

logger = logging.getLogger(__name__)


def aggregate(outcomes: Sequence[ValidationOutcome]) -> ValidationSummary:
    """AND the outcomes together, keeping input order.

    An empty input is a vacuous success.
    """
    return ValidationSummary(
        valid=all(outcome.valid for outcome in outcomes),
        files=list(outcomes),
    )


def validate_contracts(
    documents: Sequence[ContractDocument],
    validator: ContractValidator,
) -> ValidationSummary:
    """Validate each document once and aggregate the results.

    Invalid files never stop the remaining files from being validated.
    """
    index = validator.build_index(list(documents))
    outcomes = [validator.validate_file(document, index) for document in documents]
    summary = aggregate(outcomes)

    invalid = sum(1 for outcome in outcomes if not outcome.valid)
    logger.info("Validated %d contract file(s), %d invalid", len(outcomes), invalid)
    return summary
