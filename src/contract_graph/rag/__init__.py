"""Semantic module search components."""

from contract_graph.rag.embeddings import EmbeddingService
from contract_graph.rag.exceptions import EmbeddingError, RAGError, VectorStoreError
from contract_graph.rag.search import ModuleSearch
from contract_graph.rag.vector_store import VectorStore

__all__ = [
    "EmbeddingError",
    "EmbeddingService",
    "ModuleSearch",
    "RAGError",
    "VectorStore",
    "VectorStoreError",
]
