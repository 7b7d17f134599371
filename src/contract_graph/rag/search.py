"""Semantic search over persisted module descriptions."""

import logging
from typing import Sequence

from contract_graph.models import GraphModule, ModuleSearchResult
from contract_graph.rag.exceptions import EmbeddingError, VectorStoreError

from .embeddings import EmbeddingService
from .vector_store import VectorStore

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 8000
MAX_TOP_K = 1000


def record_id(module: GraphModule) -> str:
    """Vector record id for a module. Paths keep duplicate module ids apart."""
    return f"{module.source_path}::{module.id}"


class ModuleSearch:
    """Indexes graph modules by description and answers similarity queries."""

    def __init__(self, embedding_service: EmbeddingService, vector_store: VectorStore):
        """Initialize the search.

        Args:
            embedding_service: Service for generating embeddings.
            vector_store: Vector store holding module embeddings.
        """
        self.embedding_service = embedding_service
        self.vector_store = vector_store

    def index_modules(self, modules: Sequence[GraphModule], force: bool = False) -> dict[str, int]:
        """Sync the vector store with ``modules``.

        Only modules whose content hash changed are re-embedded unless
        ``force`` is set. Records for modules no longer present are deleted.

        Returns:
            Statistics dictionary with keys: total, embedded, skipped, deleted.
        """
        existing_hashes = {} if force else self.vector_store.get_all_hashes()

        to_embed = [
            m for m in modules
            if force or existing_hashes.get(record_id(m)) != m.content_hash
        ]

        if to_embed:
            try:
                vectors = self.embedding_service.embed_texts([m.description for m in to_embed])
            except Exception as e:
                raise EmbeddingError(f"Failed to embed module descriptions: {e}") from e

            try:
                self.vector_store.upsert(
                    ids=[record_id(m) for m in to_embed],
                    embeddings=vectors,
                    documents=[m.description for m in to_embed],
                    metadatas=[
                        {
                            "module_id": m.id,
                            "type": m.type,
                            "category": m.category,
                            "hash": m.content_hash,
                        }
                        for m in to_embed
                    ],
                )
            except Exception as e:
                raise VectorStoreError(f"Failed to upsert module embeddings: {e}") from e

        deleted = 0
        if not force:
            current_ids = {record_id(m) for m in modules}
            stale = sorted(set(existing_hashes) - current_ids)
            if stale:
                self.vector_store.delete(stale)
                deleted = len(stale)

        stats = {
            "total": len(modules),
            "embedded": len(to_embed),
            "skipped": len(modules) - len(to_embed),
            "deleted": deleted,
        }
        logger.info("Indexed modules: %s", stats)
        return stats

    def search(
        self,
        query: str,
        top_k: int = 10,
        similarity_threshold: float = 0.0,
    ) -> list[ModuleSearchResult]:
        """Find modules whose description is similar to ``query``.

        Args:
            query: Free-text description to search for.
            top_k: Number of results to return.
            similarity_threshold: Minimum similarity score (0-1) to include.

        Returns:
            ModuleSearchResults sorted by similarity (descending).
        """
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")
        if len(query) > MAX_QUERY_LENGTH:
            raise ValueError(f"Query exceeds maximum length of {MAX_QUERY_LENGTH}")
        if not 1 <= top_k <= MAX_TOP_K:
            raise ValueError(f"top_k must be between 1 and {MAX_TOP_K}")
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be between 0.0 and 1.0")

        try:
            query_embedding = self.embedding_service.embed_texts([query])[0]
        except Exception as e:
            raise EmbeddingError(f"Failed to embed query: {e}") from e

        try:
            raw_results = self.vector_store.query_by_embedding(
                query_embedding=query_embedding,
                top_k=top_k,
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to query vector store: {e}") from e

        results: list[ModuleSearchResult] = []
        for raw in raw_results:
            # Cosine distance
            similarity = 1.0 - raw.get("distance", 0.0)
            if similarity < similarity_threshold:
                continue

            metadata = raw.get("metadata", {})
            results.append(ModuleSearchResult(
                module_id=metadata.get("module_id", ""),
                type=metadata.get("type", ""),
                description=raw.get("document") or "",
                category=metadata.get("category", ""),
                similarity=similarity,
            ))

        results.sort(key=lambda r: r.similarity, reverse=True)
        return results
