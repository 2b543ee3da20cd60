"""
Scheme catalog backed by a JSON file
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class CatalogUnavailableError(Exception):
    """Raised when the scheme catalog cannot be read"""


class SchemeCatalog(Protocol):
    """Read-only source of scheme records"""

    async def load(self) -> List[Dict[str, Any]]:
        ...

    async def get(self, scheme_id: str) -> Optional[Dict[str, Any]]:
        ...


class JsonSchemeCatalog:
    """Loads scheme records from a JSON array on disk, fresh on every call"""

    def __init__(self, path: str):
        self.path = Path(path)

    async def load(self) -> List[Dict[str, Any]]:
        """
        Load all scheme records in file order

        Returns:
            List of raw scheme dicts

        Raises:
            CatalogUnavailableError: if the file is missing, unreadable or not a JSON array
        """
        return await asyncio.to_thread(self._read)

    async def get(self, scheme_id: str) -> Optional[Dict[str, Any]]:
        """Find a scheme record by its id"""
        for record in await self.load():
            if isinstance(record, dict) and str(record.get("id")) == scheme_id:
                return record
        return None

    def _read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            logger.error(f"Schemes file not found at: {self.path}")
            raise CatalogUnavailableError(f"Schemes database not found at {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to parse schemes file {self.path}: {e}")
            raise CatalogUnavailableError(f"Invalid schemes data format: {e}") from e

        if not isinstance(records, list):
            raise CatalogUnavailableError("Invalid schemes data format: expected a JSON array")

        logger.info(f"Loaded {len(records)} schemes from {self.path}")
        return records
