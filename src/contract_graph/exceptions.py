"""Exceptions shared by the registry, graph store and reconcile layers.

Note: Names chosen to avoid collisions with stdlib exceptions
(``ModuleNotFoundError``, ``ConnectionError``).
"""


class ContractGraphError(Exception):
    """Base exception for all contract graph operations."""


class ConfigurationError(ContractGraphError):
    """Raised when required settings are missing or invalid."""


class SourceUnavailableError(ContractGraphError):
    """Raised when the contract registry or the graph store cannot be read."""


class GraphModuleNotFoundError(ContractGraphError):
    """Raised when a module id is absent from the persisted graph."""

    def __init__(self, module_id: str) -> None:
        super().__init__(f'Module "{module_id}" not found')
        self.module_id = module_id


class ApplyConflictError(ContractGraphError):
    """Raised when an apply precondition no longer holds.

    ``conflicts`` lists the file paths whose state moved since the diff was
    computed, so the caller can re-fetch and retry.
    """

    def __init__(self, message: str, conflicts: list[str] | None = None) -> None:
        super().__init__(message)
        self.conflicts: list[str] = list(conflicts or [])
