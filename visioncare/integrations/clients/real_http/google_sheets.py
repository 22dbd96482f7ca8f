"""
Google Sheets Table Client.

Purpose:
- Reads one tab of the catalog spreadsheet through the Sheets values API
- Normalizes the returned grid into Record contracts

Usage:
- Wired in visioncare/api/main.py when GOOGLE_SHEETS_API_KEY and GOOGLE_SPREADSHEET_ID are set
- Called by ProductCatalog / GalleryCatalog through fetch(table_name)

Important:
- This client should be the ONLY place that talks to sheets.googleapis.com.
- No retries: a failure is raised to the caller as FetchError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from visioncare.cache.offline_cache import OfflineCache
from visioncare.integrations.contracts.records import FetchError, Record, check_values_grid, parse_sheet_values

logger = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"


class _TransportFailure(FetchError):
    """FetchError raised when the request never produced a response."""


class GoogleSheetsClient:
    def __init__(
        self,
        spreadsheet_id: str,
        api_key: str,
        base_url: str = SHEETS_API_BASE,
        timeout_seconds: float = 10.0,
        cache: Optional[OfflineCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key
        self.base_url = f"{base_url.rstrip('/')}/{spreadsheet_id}/values"
        self.timeout_seconds = timeout_seconds
        self.cache = cache
        self._transport = transport

    def table_url(self, table_name: str) -> str:
        return f"{self.base_url}/{quote(table_name, safe='')}"

    async def fetch(self, table_name: str) -> List[Record]:
        if self.cache is None:
            values = await self._fetch_values(table_name)
        else:
            # Only transport failures fall back to the cache; HTTP and
            # source-reported errors are still raised.
            values = await self.cache.network_first(
                f"sheets:{self.spreadsheet_id}:{table_name}",
                lambda: self._fetch_values(table_name),
                fallback_on=(_TransportFailure,),
            )
        return parse_sheet_values(values)

    async def _fetch_values(self, table_name: str) -> Optional[List[List[Any]]]:
        url = self.table_url(table_name)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.get(url, params={"key": self.api_key})
        except httpx.HTTPError as e:
            logger.error("Error fetching data for table %s: %s", table_name, e)
            raise _TransportFailure(f"Network error: {e}", table=table_name) from e

        if not response.is_success:
            logger.error("Error fetching data for table %s: HTTP %s", table_name, response.status_code)
            raise FetchError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                table=table_name,
            )

        try:
            data: Dict[str, Any] = response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from table source: {e}", status_code=response.status_code, table=table_name) from e

        if not isinstance(data, dict):
            raise FetchError("Unexpected response shape from table source", table=table_name)

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error("Table source reported an error for %s: %s", table_name, message)
            raise FetchError(message or "Unknown table source error", table=table_name)

        return check_values_grid(data.get("values"), table=table_name)

