"""Graph store interface and the shared commit semantics."""

from typing import Protocol, runtime_checkable

from contract_graph.exceptions import ApplyConflictError
from contract_graph.models.graph_models import GraphChange, GraphCommit, GraphModule


@runtime_checkable
class GraphStore(Protocol):
    """Read access to the persisted module graph plus a guarded commit.

    Implementations raise SourceUnavailableError when the backing storage
    cannot be reached, GraphModuleNotFoundError for unknown ids/paths and
    ApplyConflictError when a commit precondition fails.
    """

    def list_modules(self) -> list[GraphModule]:
        ...

    def get_module(self, module_id: str) -> GraphModule:
        ...

    def get_module_by_path(self, file_path: str) -> str:
        ...

    def commit_diff(self, changes: list[GraphChange]) -> GraphCommit:
        ...


def apply_changes(
    modules: dict[str, GraphModule],
    changes: list[GraphChange],
) -> dict[str, GraphModule]:
    """Check every precondition, then return the updated path -> module map.

    All-or-nothing: if any change conflicts, nothing is applied and the
    input mapping is left untouched.

    Args:
        modules: Current modules keyed by source path.
        changes: Writes to apply, each with its expected stored hash.

    Returns:
        New mapping with the changes applied.

    Raises:
        ApplyConflictError: If a stored hash differs from the expected one.
        ValueError: If an upsert carries no module.
    """
    conflicts: list[str] = []
    for change in changes:
        current = modules.get(change.file_path)
        current_hash = current.content_hash if current is not None else None
        if current_hash != change.expected_hash:
            conflicts.append(change.file_path)

    if conflicts:
        raise ApplyConflictError(
            f"Graph changed since the diff was computed: {len(conflicts)} conflicting file(s)",
            conflicts=conflicts,
        )

    updated = dict(modules)
    for change in changes:
        if change.action == "delete":
            updated.pop(change.file_path, None)
            continue
        if change.module is None:
            raise ValueError(f"Upsert for {change.file_path} has no module")
        updated[change.file_path] = change.module.model_copy(
            update={"source_path": change.file_path}
        )
    return updated


def find_module(modules: dict[str, GraphModule], module_id: str) -> GraphModule | None:
    """First module with the given id, by source path order."""
    for path in sorted(modules):
        if modules[path].id == module_id:
            return modules[path]
    return None
