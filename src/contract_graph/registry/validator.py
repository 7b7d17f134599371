"""Structural and cross-contract validation of registry documents."""

import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from contract_graph.models.contract_models import ContractContent, ContractDocument
from contract_graph.models.report_models import ValidationIssue, ValidationOutcome

logger = logging.getLogger(__name__)

# module id -> raw part entries declared by that module
ModuleIndex = dict[str, list[Any]]


@runtime_checkable
class ContractValidator(Protocol):
    """Validates one contract file. Invalid files are reported as data."""

    def build_index(self, documents: list[ContractDocument]) -> ModuleIndex:
        ...

    def validate_file(
        self, document: ContractDocument, index: ModuleIndex
    ) -> ValidationOutcome:
        ...


class SchemaValidator:
    """Default validator: YAML parse result, contract schema, cross references."""

    def build_index(self, documents: list[ContractDocument]) -> ModuleIndex:
        """Collect module ids and their parts from every parseable document.

        The index is built from raw data so that references to a module whose
        own file has schema errors still resolve.
        """
        index: ModuleIndex = {}
        for document in documents:
            data = document.data
            if not isinstance(data, dict) or not isinstance(data.get("id"), str):
                continue
            parts = data.get("parts")
            index[data["id"]] = parts if isinstance(parts, list) else []
        return index

    def validate_file(
        self, document: ContractDocument, index: ModuleIndex
    ) -> ValidationOutcome:
        """Validate a single document.

        Args:
            document: Raw registry entry.
            index: Module index from build_index() over the same scan.

        Returns:
            ValidationOutcome with valid=False and issues on any error.
        """
        if document.parse_error is not None:
            logger.error("Parse error in %s: %s", document.file_name, document.parse_error)
            return ValidationOutcome(
                file_name=document.file_name,
                file_path=document.file_path,
                valid=False,
                errors=[ValidationIssue(
                    path="file",
                    message=f"Failed to parse YAML: {document.parse_error}",
                )],
            )

        errors: list[ValidationIssue] = []
        content: ContractContent | None = None
        try:
            content = ContractContent.model_validate(document.data)
        except ValidationError as exc:
            for err in exc.errors():
                path = ".".join(str(loc) for loc in err["loc"]) or "root"
                errors.append(ValidationIssue(path=path, message=err["msg"]))

        if content is not None:
            errors.extend(_check_references(content, index))

        if errors:
            logger.warning("Invalid: %s (%d issue(s))", document.file_name, len(errors))
        else:
            logger.debug("Valid: %s", document.file_name)

        return ValidationOutcome(
            file_name=document.file_name,
            file_path=document.file_path,
            valid=not errors,
            errors=errors,
        )


def _check_references(content: ContractContent, index: ModuleIndex) -> list[ValidationIssue]:
    """Referenced modules must exist and referenced part types must match."""
    issues: list[ValidationIssue] = []
    for i, dep in enumerate(content.dependencies):
        if dep.module_id not in index:
            issues.append(ValidationIssue(
                path=f"dependencies.{i}.module_id",
                message=f'Referenced module "{dep.module_id}" does not exist',
            ))
            continue

        declared = {
            part.get("id"): part.get("type")
            for part in index[dep.module_id]
            if isinstance(part, dict) and isinstance(part.get("id"), str)
        }
        for j, dep_part in enumerate(dep.parts):
            if dep_part.part_id not in declared:
                continue
            expected = declared[dep_part.part_id]
            if expected != dep_part.type:
                issues.append(ValidationIssue(
                    path=f"dependencies.{i}.parts.{j}.type",
                    message=f'Part type mismatch: expected "{expected}" but got "{dep_part.type}"',
                ))
    return issues
