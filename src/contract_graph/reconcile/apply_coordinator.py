"""Commit a change set to the graph under optimistic concurrency."""

import logging
from typing import Sequence

from contract_graph.exceptions import ApplyConflictError
from contract_graph.graph.store import GraphStore
from contract_graph.models.change_models import ChangeRecord, ChangeStatus
from contract_graph.models.contract_models import ContractFile
from contract_graph.models.graph_models import DependencyEdge, GraphChange, GraphModule
from contract_graph.models.report_models import ApplyResult
from contract_graph.reconcile.snapshot import read_graph_snapshot
from contract_graph.utils.fingerprint import content_fingerprint

logger = logging.getLogger(__name__)


def to_graph_module(contract: ContractFile) -> GraphModule:
    """Persisted form of a contract."""
    content = contract.content
    return GraphModule(
        id=content.id,
        category=content.category,
        type=content.type,
        description=content.description,
        parts=list(content.parts),
        dependencies=[
            DependencyEdge(module_id=dep.module_id, parts=list(dep.parts))
            for dep in content.dependencies
        ],
        source_path=contract.file_path,
        content_hash=content_fingerprint(content),
    )


class ApplyCoordinator:
    """Turns a caller-supplied diff into guarded graph writes.

    The diff is trusted, not re-derived. Each record's hashes are the
    precondition: the registry content must still match ``current_hash`` and
    the graph must still hold ``stored_hash`` at that path. Any mismatch
    raises ApplyConflictError and nothing is written, which also makes a
    second apply of the same diff fail.
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    def apply(
        self,
        diff: Sequence[ChangeRecord],
        contracts: Sequence[ContractFile],
    ) -> ApplyResult:
        """Apply ``diff`` using the contents in ``contracts``.

        Args:
            diff: Change records from the change detector.
            contracts: Registry snapshot supplying content for added and
                modified records, matched by file path.

        Returns:
            ApplyResult with module and part counts.

        Raises:
            ApplyConflictError: If the registry or the graph moved since the
                diff was computed.
            SourceUnavailableError: If the graph store cannot be reached.
        """
        if not diff:
            return ApplyResult(message="No changes to apply")

        by_path = {contract.file_path: contract for contract in contracts}
        stored = {module.source_path: module for module in read_graph_snapshot(self._store)}

        changes: list[GraphChange] = []
        registry_conflicts: list[str] = []
        parts_by_module: dict[str, int] = {}

        for record in diff:
            if record.status == ChangeStatus.REMOVED:
                changes.append(GraphChange(
                    action="delete",
                    file_path=record.file_path,
                    expected_hash=record.stored_hash,
                ))
                old = stored.get(record.file_path)
                parts_by_module.setdefault(record.module_id, len(old.parts) if old else 0)
                continue

            contract = by_path.get(record.file_path)
            if contract is None or content_fingerprint(contract.content) != record.current_hash:
                registry_conflicts.append(record.file_path)
                continue

            module = to_graph_module(contract)
            changes.append(GraphChange(
                action="upsert",
                file_path=record.file_path,
                module=module,
                expected_hash=record.stored_hash,
            ))
            # New content wins over a removal of the same id (moved file)
            parts_by_module[record.module_id] = len(module.parts)

        if registry_conflicts:
            logger.warning("Registry changed for %d file(s); apply refused", len(registry_conflicts))
            raise ApplyConflictError(
                f"Contracts changed since the diff was computed: {len(registry_conflicts)} file(s)",
                conflicts=registry_conflicts,
            )

        try:
            commit = self._store.commit_diff(changes)
        except ApplyConflictError as exc:
            logger.warning("Apply refused: %s (%s)", exc, ", ".join(exc.conflicts))
            raise

        modules_processed = len(parts_by_module)
        parts_processed = sum(parts_by_module.values())
        message = (
            f"Successfully applied {modules_processed} modules and "
            f"{parts_processed} parts to the graph"
        )
        logger.info("%s (revision %d)", message, commit.revision)

        return ApplyResult(
            message=message,
            modules_processed=modules_processed,
            parts_processed=parts_processed,
        )
