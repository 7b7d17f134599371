"""Runtime settings read from the environment (and a local .env file)."""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_GRAPH_STORE_PATH = "./data/graph.json"
DEFAULT_VECTOR_STORE_DIR = "./data/embeddings"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_LOG_LEVEL = "WARNING"

# Safe keys allowed in config output (no secrets)
SAFE_SETTING_KEYS = frozenset({
    "contracts_path",
    "graph_store_path",
    "vector_store_dir",
    "embedding_model",
    "log_level",
})


class Settings(BaseModel):
    model_config = ConfigDict(frozen=False)

    contracts_path: Optional[str] = None  # glob pattern, e.g. "./contracts/**/*.yml"
    graph_store_path: str = DEFAULT_GRAPH_STORE_PATH
    vector_store_dir: str = DEFAULT_VECTOR_STORE_DIR
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    openai_api_key: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def safe_dump(self) -> dict:
        """Settings without secrets, for display."""
        return {k: v for k, v in self.model_dump().items() if k in SAFE_SETTING_KEYS}


def load_settings(load_env_file: bool = True) -> Settings:
    """Build Settings from environment variables.

    Args:
        load_env_file: Load a ``.env`` file from the working directory first.
            Existing environment variables take precedence over the file.

    Returns:
        Settings populated from the environment, defaults elsewhere.
    """
    if load_env_file:
        load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        contracts_path=os.getenv("CONTRACTS_PATH") or None,
        graph_store_path=os.getenv("GRAPH_STORE_PATH", DEFAULT_GRAPH_STORE_PATH),
        vector_store_dir=os.getenv("VECTOR_STORE_DIR", DEFAULT_VECTOR_STORE_DIR),
        embedding_model=os.getenv("EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
