"""
Local Table Client (Mock/Local).

Purpose:
- Acts as a development-time table source when Google Sheets credentials are not available.
- Loads value grids from a local YAML file shaped like the Sheets API response.

Usage:
- Wired in visioncare/api/main.py when INTEGRATIONS_MODE=mock or credentials are missing
- Called by the catalog stores through the same fetch(table_name) contract

Swap:
Replace with clients/real_http/google_sheets.py once the API key and spreadsheet id are set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from visioncare.integrations.contracts.records import FetchError, Record, check_values_grid, parse_sheet_values

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_PATH = Path(__file__).parent.parent.parent.parent.parent / "config" / "sample_catalog.yml"


class LocalSheetsClient:
    def __init__(self, path: Optional[Path] = None, tables: Optional[Dict[str, List[List[Any]]]] = None) -> None:
        self.path = Path(path) if path else DEFAULT_SAMPLE_PATH
        self._tables = tables

    def _load_tables(self) -> Dict[str, List[List[Any]]]:
        if self._tables is not None:
            return self._tables
        if not self.path.exists():
            raise FetchError(f"Sample catalog file not found: {self.path}")
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return data.get("tables") or {}

    async def fetch(self, table_name: str) -> List[Record]:
        tables = self._load_tables()
        if table_name not in tables:
            logger.error("Table %s not present in local catalog %s", table_name, self.path)
            raise FetchError(f"Unable to parse range: {table_name}", status_code=400, table=table_name)
        return parse_sheet_values(check_values_grid(tables[table_name], table=table_name))
