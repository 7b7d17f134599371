"""Change detection between the contract registry and the persisted graph."""

import logging
from pathlib import Path
from typing import Sequence

from contract_graph.graph.store import GraphStore
from contract_graph.models.change_models import (
    ChangeRecord,
    ChangeReport,
    ChangeStatus,
    ModuleIdConflict,
)
from contract_graph.models.contract_models import ContractFile
from contract_graph.models.graph_models import GraphModule
from contract_graph.reconcile.snapshot import read_graph_snapshot
from contract_graph.utils.fingerprint import canonical_content, content_fingerprint

logger = logging.getLogger(__name__)


def detect_changes(
    contracts: Sequence[ContractFile],
    modules: Sequence[GraphModule],
) -> list[ChangeRecord]:
    """Classify every file path as added, modified, removed or unchanged.

    Contracts are correlated with graph modules by file path (the module's
    ``source_path``). Unchanged paths are omitted from the result.

    Args:
        contracts: Current registry snapshot.
        modules: Persisted graph snapshot.

    Returns:
        ChangeRecords, one per changed path. Sorted by path for display only;
        callers must not depend on the order.
    """
    registry = {contract.file_path: contract for contract in contracts}
    graph = {module.source_path: module for module in modules}

    records: list[ChangeRecord] = []
    for path in sorted(set(registry) | set(graph)):
        contract = registry.get(path)
        module = graph.get(path)

        if module is None:
            records.append(ChangeRecord(
                file_path=path,
                status=ChangeStatus.ADDED,
                module_id=contract.content.id,
                file_name=contract.file_name,
                current_hash=content_fingerprint(contract.content),
                stored_hash=None,
            ))
        elif contract is None:
            records.append(ChangeRecord(
                file_path=path,
                status=ChangeStatus.REMOVED,
                module_id=module.id,
                file_name=Path(path).name,
                current_hash=None,
                stored_hash=module.content_hash,
            ))
        elif canonical_content(contract.content) != canonical_content(module):
            records.append(ChangeRecord(
                file_path=path,
                status=ChangeStatus.MODIFIED,
                module_id=contract.content.id,
                file_name=contract.file_name,
                current_hash=content_fingerprint(contract.content),
                stored_hash=module.content_hash,
            ))

    return records


def find_module_id_conflicts(contracts: Sequence[ContractFile]) -> list[ModuleIdConflict]:
    """Module ids declared by more than one contract file."""
    paths_by_id: dict[str, list[str]] = {}
    for contract in contracts:
        paths_by_id.setdefault(contract.content.id, []).append(contract.file_path)

    return [
        ModuleIdConflict(module_id=module_id, file_paths=sorted(paths))
        for module_id, paths in sorted(paths_by_id.items())
        if len(paths) > 1
    ]


class ChangeDetector:
    """Compares a registry snapshot with the live graph store."""

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    def detect(self, contracts: Sequence[ContractFile]) -> ChangeReport:
        """Build a change report for ``contracts``.

        Raises:
            SourceUnavailableError: If the graph cannot be read. No partial
                report is produced.
        """
        modules = read_graph_snapshot(self._store)
        changes = detect_changes(contracts, modules)
        anomalies = find_module_id_conflicts(contracts)

        report = ChangeReport.from_changes(changes, anomalies)
        logger.info(
            "Contract changes detected: %d modified, %d added, %d removed",
            report.modified_count,
            report.added_count,
            report.removed_count,
        )
        for anomaly in anomalies:
            logger.warning(
                'Module id "%s" is declared by %d files: %s',
                anomaly.module_id,
                len(anomaly.file_paths),
                ", ".join(anomaly.file_paths),
            )
        return report
