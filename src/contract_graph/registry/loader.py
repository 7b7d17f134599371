"""Contract registry: loads YAML contract files matching a glob pattern."""

import glob
import logging
from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError

from contract_graph.exceptions import ConfigurationError, SourceUnavailableError
from contract_graph.models.contract_models import ContractContent, ContractDocument, ContractFile
from contract_graph.utils.fingerprint import file_hash

logger = logging.getLogger(__name__)


class ContractRegistry:
    """Read-only snapshot source for contract files.

    Nothing is cached: every call re-reads the files matching the pattern.
    """

    def __init__(self, pattern: str | None):
        """Initialize the registry.

        Args:
            pattern: Glob pattern for contract files, e.g. "./contracts/**/*.yml".

        Raises:
            ConfigurationError: If no pattern is configured.
        """
        if not pattern:
            raise ConfigurationError("CONTRACTS_PATH environment variable is not set")
        self.pattern = pattern

    def _resolve_files(self) -> list[str]:
        """Expand the glob pattern into a sorted list of absolute file paths."""
        try:
            matches = glob.glob(self.pattern, recursive=True)
        except OSError as exc:
            raise SourceUnavailableError(
                f"Failed to load contracts from {self.pattern}: {exc}"
            ) from exc

        return sorted(str(Path(m).resolve()) for m in matches if Path(m).is_file())

    def scan(self) -> list[ContractDocument]:
        """Read and YAML-parse every matching file.

        Parse and read failures are recorded on the document, not raised.

        Returns:
            One ContractDocument per matching file, sorted by path.
        """
        files = self._resolve_files()
        if not files:
            logger.warning("No contract files found matching pattern: %s", self.pattern)
            return []

        logger.info("Found %d contract file(s) matching %s", len(files), self.pattern)

        documents: list[ContractDocument] = []
        for file_path in files:
            file_name = Path(file_path).name
            try:
                text = Path(file_path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Error reading file %s: %s", file_path, exc)
                documents.append(ContractDocument(
                    file_name=file_name,
                    file_path=file_path,
                    file_hash="",
                    parse_error=f"Failed to read file: {exc}",
                ))
                continue

            try:
                data = yaml.safe_load(text)
                parse_error = None
            except yaml.YAMLError as exc:
                data = None
                parse_error = str(exc)
                logger.error("Error parsing file %s: %s", file_path, exc)

            documents.append(ContractDocument(
                file_name=file_name,
                file_path=file_path,
                file_hash=file_hash(text),
                data=data,
                parse_error=parse_error,
            ))

        return documents

    def list_contracts(self) -> list[ContractFile]:
        """Return all schema-valid contracts.

        Files that fail to parse or do not match the contract schema are
        logged and skipped; the remaining files are still returned.
        """
        contracts: list[ContractFile] = []
        for document in self.scan():
            contract = to_contract_file(document)
            if contract is not None:
                contracts.append(contract)
        return contracts


def to_contract_file(document: ContractDocument) -> ContractFile | None:
    """Validate a raw document into a ContractFile, or None if it is not valid."""
    if document.parse_error is not None:
        return None
    try:
        content = ContractContent.model_validate(document.data)
    except ValidationError as exc:
        logger.warning(
            "Skipping %s: %d schema error(s)", document.file_name, exc.error_count()
        )
        return None

    logger.debug("Successfully parsed: %s", document.file_name)
    return ContractFile(
        file_name=document.file_name,
        file_path=document.file_path,
        content=content,
        file_hash=document.file_hash,
    )


def list_categories(contracts: Iterable[ContractFile]) -> list[str]:
    """Sorted distinct contract categories."""
    return sorted({c.content.category for c in contracts})


def list_types(contracts: Iterable[ContractFile]) -> list[str]:
    """Sorted distinct contract types."""
    return sorted({c.content.type for c in contracts})
