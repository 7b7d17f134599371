"""In-process graph store."""

import threading
from typing import Iterable

from contract_graph.exceptions import GraphModuleNotFoundError
from contract_graph.graph.store import apply_changes, find_module
from contract_graph.models.graph_models import GraphChange, GraphCommit, GraphModule


class InMemoryGraphStore:
    """Graph store holding modules in a dict keyed by source path."""

    def __init__(self, modules: Iterable[GraphModule] | None = None):
        self._lock = threading.Lock()
        self._modules: dict[str, GraphModule] = {
            m.source_path: m for m in (modules or [])
        }
        self._revision = 0

    @property
    def revision(self) -> int:
        """Number of successful commits."""
        return self._revision

    def list_modules(self) -> list[GraphModule]:
        with self._lock:
            return [self._modules[path] for path in sorted(self._modules)]

    def get_module(self, module_id: str) -> GraphModule:
        with self._lock:
            module = find_module(self._modules, module_id)
        if module is None:
            raise GraphModuleNotFoundError(module_id)
        return module

    def get_module_by_path(self, file_path: str) -> str:
        with self._lock:
            module = self._modules.get(file_path)
        if module is None:
            raise GraphModuleNotFoundError(file_path)
        return module.id

    def commit_diff(self, changes: list[GraphChange]) -> GraphCommit:
        with self._lock:
            self._modules = apply_changes(self._modules, changes)
            self._revision += 1
            return GraphCommit(revision=self._revision, applied=len(changes))
