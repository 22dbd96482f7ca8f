"""
Catalog stores: the fetched record list of one entity kind plus the filtered
view the pages render from.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

from visioncare.integrations.contracts.records import EntityKind, FetchError, LoadState, Record
from visioncare.utils.config_loader import GalleryColumns, ProductColumns

logger = logging.getLogger(__name__)


class TableClient(Protocol):
    async def fetch(self, table_name: str) -> List[Record]:
        ...


class CatalogStore:
    kind: EntityKind

    def __init__(
        self,
        client: TableClient,
        table_name: str,
        search_fields: List[str],
        preview_limit: int = 3,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.client = client
        self.table_name = table_name
        self.search_fields = list(search_fields)
        self.preview_limit = preview_limit
        self.timeout_seconds = timeout_seconds
        self.records: List[Record] = []
        self.filtered: List[Record] = []
        self.state = LoadState.LOADING
        self.error: Optional[str] = None

    async def load(self) -> List[Record]:
        """Fetch the table; on failure log, mark FAILED and return []."""
        self.state = LoadState.LOADING
        self.error = None
        try:
            fetch = self.client.fetch(self.table_name)
            if self.timeout_seconds is not None:
                records = await asyncio.wait_for(fetch, timeout=self.timeout_seconds)
            else:
                records = await fetch
        except FetchError as e:
            logger.error("Failed to load %s catalog from %s: %s", self.kind.value, self.table_name, e)
            return self._mark_failed(str(e))
        except asyncio.TimeoutError:
            logger.error("Timed out loading %s catalog after %ss", self.kind.value, self.timeout_seconds)
            return self._mark_failed(f"Timed out after {self.timeout_seconds}s")

        self.records = list(records)
        self.filtered = list(self.records)
        self.state = LoadState.LOADED if self.records else LoadState.EMPTY
        logger.info("Loaded %d %s records", len(self.records), self.kind.value)
        return self.records

    def _mark_failed(self, message: str) -> List[Record]:
        self.records = []
        self.filtered = []
        self.state = LoadState.FAILED
        self.error = message
        return []

    @property
    def failed(self) -> bool:
        return self.state == LoadState.FAILED

    def preview(self, limit: Optional[int] = None) -> List[Record]:
        if limit is None:
            limit = self.preview_limit
        return self.filtered[:limit]

    def by_id(self, row_id: int) -> Optional[Record]:
        return next((record for record in self.filtered if record.row_id == row_id), None)

    def reset(self) -> List[Record]:
        self.filtered = list(self.records)
        return self.filtered

    def search(self, query: Optional[str]) -> List[Record]:
        """Case-insensitive substring search; an empty query resets to the full list."""
        if not query or not query.strip():
            return self.reset()

        needle = query.strip().lower()
        self.filtered = [
            record
            for record in self.records
            if any(needle in record.get(key).lower() for key in self.search_fields)
        ]
        return self.filtered


class ProductCatalog(CatalogStore):
    kind = EntityKind.PRODUCT

    def __init__(self, client: TableClient, table_name: str, columns: ProductColumns, **kwargs) -> None:
        super().__init__(client, table_name, columns.search_fields, **kwargs)
        self.columns = columns


class GalleryCatalog(CatalogStore):
    kind = EntityKind.GALLERY

    def __init__(self, client: TableClient, table_name: str, columns: GalleryColumns, **kwargs) -> None:
        super().__init__(client, table_name, columns.search_fields, **kwargs)
        self.columns = columns

    def filter_by_category(self, category: Optional[str]) -> List[Record]:
        """Exact, case-insensitive category match over the full list (drops any active search)."""
        if not category or not category.strip():
            return self.reset()

        wanted = category.strip().lower()
        self.filtered = [record for record in self.records if record.get(self.columns.category).strip().lower() == wanted]
        return self.filtered

    def categories(self) -> List[str]:
        seen: List[str] = []
        for record in self.records:
            value = record.get(self.columns.category).strip()
            if value and value.lower() not in {c.lower() for c in seen}:
                seen.append(value)
        return seen
