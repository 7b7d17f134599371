"""Graph store persisted as a single JSON document."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout
from pydantic import ValidationError

from contract_graph.exceptions import GraphModuleNotFoundError, SourceUnavailableError
from contract_graph.graph.store import apply_changes, find_module
from contract_graph.models.graph_models import GraphChange, GraphCommit, GraphModule

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class JsonGraphStore:
    """Graph store backed by a JSON file.

    The file is re-read on every call so each request sees a fresh snapshot.
    Commits re-check preconditions against the file content and replace it
    atomically.
    """

    def __init__(self, path: str = "./data/graph.json", lock_timeout: float = 10.0):
        """Initialize the store.

        Args:
            path: Location of the JSON document. It is created on first commit.
            lock_timeout: Seconds to wait for another process's commit.
        """
        self.path = Path(path)
        self.lock_path = f"{self.path}.lock"
        self.lock_timeout = lock_timeout
        self._lock = threading.Lock()

    def _read(self) -> tuple[dict[str, GraphModule], int]:
        """Load modules keyed by source path and the current revision."""
        if not self.path.exists():
            return {}, 0

        try:
            payload: Any = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict) or not isinstance(payload.get("modules", []), list):
                raise ValueError("expected an object with a list of modules")
            modules = [GraphModule.model_validate(m) for m in payload.get("modules", [])]
            revision = int(payload.get("revision", 0))
        except (OSError, ValueError, TypeError, ValidationError) as exc:
            raise SourceUnavailableError(f"Failed to read graph store {self.path}: {exc}") from exc

        return {m.source_path: m for m in modules}, revision

    def _write(self, modules: dict[str, GraphModule], revision: int) -> None:
        payload = {
            "schema_version": SCHEMA_VERSION,
            "revision": revision,
            "modules": [modules[p].model_dump(mode="json") for p in sorted(modules)],
        }
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SourceUnavailableError(f"Failed to write graph store {self.path}: {exc}") from exc

    @property
    def revision(self) -> int:
        return self._read()[1]

    def list_modules(self) -> list[GraphModule]:
        modules, _ = self._read()
        return [modules[path] for path in sorted(modules)]

    def get_module(self, module_id: str) -> GraphModule:
        modules, _ = self._read()
        module = find_module(modules, module_id)
        if module is None:
            raise GraphModuleNotFoundError(module_id)
        return module

    def get_module_by_path(self, file_path: str) -> str:
        modules, _ = self._read()
        module = modules.get(file_path)
        if module is None:
            raise GraphModuleNotFoundError(file_path)
        return module.id

    def _file_lock(self) -> FileLock:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(self.lock_path, timeout=self.lock_timeout)

    def commit_diff(self, changes: list[GraphChange]) -> GraphCommit:
        """Check preconditions and write, holding the document lock throughout.

        The lock file is shared by every process using the same document, so
        concurrent commits are serialized and the later one sees the earlier
        one's write.

        Raises:
            ApplyConflictError: If any precondition no longer holds.
            SourceUnavailableError: If the document cannot be read, written
                or locked in time.
        """
        with self._lock:
            try:
                lock = self._file_lock()
                lock.acquire()
            except (OSError, Timeout) as exc:
                raise SourceUnavailableError(f"Failed to lock graph store {self.path}: {exc}") from exc
            try:
                modules, revision = self._read()
                updated = apply_changes(modules, changes)
                revision += 1
                self._write(updated, revision)
            finally:
                lock.release()

            logger.info("Committed %d change(s) to %s (revision %d)", len(changes), self.path, revision)
            return GraphCommit(revision=revision, applied=len(changes))
