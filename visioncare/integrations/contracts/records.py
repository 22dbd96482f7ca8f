"""
Record contract: normalized spreadsheet rows and the table-source error type.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

_WHITESPACE = re.compile(r"\s+")

# Spreadsheet row of the first data row (row 1 is the header).
FIRST_DATA_ROW = 2


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class EntityKind(str, Enum):
    PRODUCT = "product"
    GALLERY = "gallery"


class LoadState(str, Enum):
    LOADING = "LOADING"
    LOADED = "LOADED"
    EMPTY = "EMPTY"
    FAILED = "FAILED"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class FetchError(Exception):
    """Network failure, non-success HTTP status, or a source-reported error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, table: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.table = table


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Record:
    """One row of a source table.

    ``row_id`` is the spreadsheet row number the record was read from and is
    the only identity used for lookups and page handoffs.
    """

    row_id: int
    fields: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        return self.fields.get(key, default) or default

    def to_dict(self) -> Dict[str, str]:
        return dict(self.fields)

    def to_json(self) -> str:
        return json.dumps({"row_id": self.row_id, "fields": self.fields}, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "Record":
        """Rebuild a record from ``to_json`` output; raises ValueError when malformed."""
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("Record payload must be an object")
        row_id = data.get("row_id")
        fields = data.get("fields")
        if not isinstance(row_id, int) or isinstance(row_id, bool):
            raise ValueError("Record payload has no integer row_id")
        if not isinstance(fields, dict):
            raise ValueError("Record payload has no fields object")
        return cls(row_id=row_id, fields={str(k): "" if v is None else str(v) for k, v in fields.items()})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_header(header: Any) -> str:
    """'Frame Color ' -> 'frame_color'."""
    return _WHITESPACE.sub("_", str(header).strip().lower())


def check_values_grid(values: Any, table: Optional[str] = None) -> Optional[List[List[Any]]]:
    """Return ``values`` unchanged if it is a list of row lists (or None); raise FetchError otherwise."""
    if values is None:
        return None
    if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
        raise FetchError("Unexpected response shape: values must be a list of rows", table=table)
    return values


def parse_sheet_values(values: Optional[List[List[Any]]]) -> List[Record]:
    """Turn a values grid (row 0 = header) into Records.

    Short rows are padded with empty strings; cells past the header width are
    ignored. A missing grid or an empty header yields no records.
    """
    if not values:
        return []

    headers = [normalize_header(h) for h in values[0]]
    if not headers:
        return []

    records: List[Record] = []
    for offset, row in enumerate(values[1:]):
        row = row or []
        item: Dict[str, str] = {}
        for index, key in enumerate(headers):
            cell = row[index] if index < len(row) else None
            item[key] = "" if cell is None else str(cell)
        records.append(Record(row_id=FIRST_DATA_ROW + offset, fields=item))
    return records
