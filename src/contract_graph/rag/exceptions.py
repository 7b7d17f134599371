"""Module search exceptions."""

from contract_graph.exceptions import ContractGraphError


class RAGError(ContractGraphError):
    """Base exception for module search operations."""


class EmbeddingError(RAGError):
    """Exception raised when embedding generation fails."""


class VectorStoreError(RAGError):
    """Exception raised when vector store operations fail."""
