"""Contract registry: file loading and validation."""

from contract_graph.registry.loader import (
    ContractRegistry,
    list_categories,
    list_types,
    to_contract_file,
)
from contract_graph.registry.validator import ContractValidator, ModuleIndex, SchemaValidator

__all__ = [
    "ContractRegistry",
    "ContractValidator",
    "ModuleIndex",
    "SchemaValidator",
    "list_categories",
    "list_types",
    "to_contract_file",
]
