"""OpenAI embeddings for module descriptions."""

import logging
import os
import time
from typing import Optional

import openai

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"

# Seconds to wait before the 2nd and 3rd attempt
RETRY_DELAYS = (1, 2)
RETRYABLE_ERRORS = (openai.RateLimitError, openai.APIConnectionError)


class EmbeddingService:
    """Turns description strings into vectors, ``batch_size`` texts per request."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_EMBEDDING_MODEL,
        batch_size: int = 100,
    ):
        """
        Raises:
            ValueError: If no key is passed and OPENAI_API_KEY is unset.
        """
        api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("No OpenAI API key: pass api_key or set OPENAI_API_KEY")

        self.client = openai.OpenAI(api_key=api_key)
        self.model = model
        self.batch_size = batch_size

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Vectors for ``texts``, in input order. Empty input makes no request."""
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            vectors.extend(self._request(texts[start : start + self.batch_size]))

        if vectors:
            logger.debug("Embedded %d description(s) with %s", len(vectors), self.model)
        return vectors

    def _request(self, batch: list[str]) -> list[list[float]]:
        # Transient API failures are retried; the last one propagates
        for delay in (*RETRY_DELAYS, None):
            try:
                response = self.client.embeddings.create(input=batch, model=self.model)
            except RETRYABLE_ERRORS as exc:
                if delay is None:
                    raise
                logger.warning("Embedding request failed (%s); retrying in %ss", exc, delay)
                time.sleep(delay)
                continue
            return [item.embedding for item in response.data]
