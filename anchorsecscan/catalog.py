"""
Vulnerability description catalog.

Long-form write-ups keyed by vulnerability id, loaded from a directory of
JSON documents:

    vulnerabilities/
        index.json          {"vulnerabilities": [{"id": "reinitialization"}, ...]}
        reinitialization.json
        ...

Each detail document may carry ``description``, ``example_scenario`` and
``secure_example``. The catalog only enriches report text; detection never
consults it.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from pydantic import BaseModel, ValidationError

INDEX_FILE = "index.json"
DEFAULT_DESCRIPTIONS_DIR = Path("vulnerabilities")

logger = logging.getLogger(__name__)


class VulnerabilityDescription(BaseModel):
    """One catalog entry."""
    description: Optional[str] = None
    example_scenario: Optional[str] = None
    secure_example: Optional[str] = None


class DescriptionCatalog:
    """Read-only keyword lookup over vulnerability descriptions."""

    def __init__(self, entries: Optional[Dict[str, VulnerabilityDescription]] = None):
        self._entries: Dict[str, VulnerabilityDescription] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def lookup(self, keyword: str) -> Optional[VulnerabilityDescription]:
        """
        Find the first entry whose key contains the keyword.

        Matching is a case-insensitive substring test. Keys are tried in
        sorted order so that several matching keys always resolve the same
        way.

        Args:
            keyword: Word taken from a finding description

        Returns:
            Matching entry or None
        """
        if not keyword:
            return None
        needle = keyword.lower()
        for key in self:
            if needle in key.lower():
                return self._entries[key]
        return None

    @classmethod
    def load(cls, directory: Union[str, Path] = DEFAULT_DESCRIPTIONS_DIR) -> "DescriptionCatalog":
        """
        Load descriptions from a directory.

        Args:
            directory: Directory holding index.json and the detail documents

        Returns:
            Catalog; empty when the directory is missing or unreadable
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning(f"Vulnerabilities directory does not exist at: {directory}")
            return cls()

        logger.debug(f"Looking for vulnerability descriptions in: {directory}")
        index_path = directory / INDEX_FILE
        try:
            if index_path.exists():
                entries = cls._load_indexed(directory, index_path)
            else:
                logger.debug("No index.json found, looking for individual description files")
                entries = cls._load_all(directory)
        except OSError as e:
            logger.warning(f"Could not read vulnerability descriptions from {directory}: {e}")
            return cls()

        logger.info(f"Loaded {len(entries)} vulnerability descriptions")
        return cls(entries)

    @classmethod
    def _load_indexed(cls, directory: Path, index_path: Path) -> Dict[str, VulnerabilityDescription]:
        entries: Dict[str, VulnerabilityDescription] = {}
        index = _read_json(index_path)
        if not isinstance(index, dict):
            return entries

        vulns = index.get("vulnerabilities")
        if not isinstance(vulns, list):
            return entries

        logger.debug(f"Index file contains {len(vulns)} vulnerabilities")
        for item in vulns:
            vuln_id = item.get("id") if isinstance(item, dict) else None
            if not isinstance(vuln_id, str):
                continue
            detail_path = directory / f"{vuln_id}.json"
            if not detail_path.exists():
                logger.debug(f"Missing file for vulnerability: {vuln_id}")
                continue
            entry = _read_entry(detail_path)
            if entry is not None:
                entries[vuln_id] = entry
        return entries

    @classmethod
    def _load_all(cls, directory: Path) -> Dict[str, VulnerabilityDescription]:
        entries: Dict[str, VulnerabilityDescription] = {}
        for path in sorted(directory.glob("*.json")):
            if path.name == INDEX_FILE:
                continue
            entry = _read_entry(path)
            if entry is not None:
                entries[path.stem] = entry
        return entries


def _read_json(path: Path) -> Optional[object]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Skipping unreadable description file {path}: {e}")
        return None


def _read_entry(path: Path) -> Optional[VulnerabilityDescription]:
    data = _read_json(path)
    if not isinstance(data, dict):
        return None
    # non-string fields are dropped rather than failing the whole entry
    fields = {k: v for k, v in data.items() if k in VulnerabilityDescription.model_fields and isinstance(v, str)}
    try:
        entry = VulnerabilityDescription.model_validate(fields)
    except ValidationError as e:
        logger.warning(f"Invalid description in {path}: {e}")
        return None
    logger.debug(f"Loaded description for: {path.stem}")
    return entry
