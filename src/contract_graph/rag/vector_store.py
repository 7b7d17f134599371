"""Vector store for module descriptions using ChromaDB."""

from typing import Any, Optional, cast

import chromadb


class VectorStore:
    """ChromaDB collection holding one record per graph module."""

    def __init__(
        self,
        persist_dir: str = "./data/embeddings",
        collection_name: str = "modules",
    ):
        """Initialize the vector store.

        Args:
            persist_dir: Directory to persist the ChromaDB data.
            collection_name: Name of the collection to use.
        """
        self.client = chromadb.PersistentClient(path=persist_dir)
        self.collection = self.client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def upsert(
        self,
        ids: list[str],
        embeddings: list[list[float]],
        documents: list[str],
        metadatas: list[dict[str, Any]],
    ) -> None:
        """Insert or update records. All lists are parallel."""
        if not ids:
            return
        self.collection.upsert(
            ids=ids,
            embeddings=cast(Any, embeddings),
            documents=documents,
            metadatas=cast(Any, metadatas),
        )

    def delete(self, ids: list[str]) -> None:
        """Delete records by their IDs."""
        if ids:
            self.collection.delete(ids=ids)

    def count(self) -> int:
        return self.collection.count()

    def query_by_embedding(
        self,
        query_embedding: list[float],
        top_k: int = 10,
        where: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """Query the vector store by embedding vector.

        Returns:
            Dicts with "id", "document", "metadata" and "distance".
        """
        available = self.count()
        if available == 0:
            return []

        results = self.collection.query(
            query_embeddings=cast(Any, [query_embedding]),
            n_results=min(top_k, available),
            where=where,
        )

        records: list[dict[str, Any]] = []
        result_ids = results["ids"]
        if result_ids and result_ids[0]:
            row_ids = result_ids[0]
            row_docs = results["documents"][0] if results["documents"] else [None] * len(row_ids)
            row_metas = results["metadatas"][0] if results["metadatas"] else [{}] * len(row_ids)
            row_dists = results["distances"][0] if results["distances"] else [0.0] * len(row_ids)

            for i in range(len(row_ids)):
                records.append({
                    "id": row_ids[i],
                    "document": row_docs[i],
                    "metadata": dict(row_metas[i] or {}),
                    "distance": row_dists[i],
                })

        return records

    def get_all_hashes(self) -> dict[str, str]:
        """Map of record ID to the content hash it was embedded from."""
        results = self.collection.get()

        hashes: dict[str, str] = {}
        if results["ids"]:
            metas = results["metadatas"] or [{}] * len(results["ids"])
            for record_id, metadata in zip(results["ids"], metas):
                hash_value = (metadata or {}).get("hash", "")
                if isinstance(hash_value, str):
                    hashes[record_id] = hash_value

        return hashes
