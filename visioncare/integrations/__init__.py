"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- The Google Sheets values API (products and surgery gallery tables)
- A local YAML grid file used as the catalog source during development

Key rule:
- Catalog stores MUST NOT call external APIs directly.
- Stores call table clients (under visioncare/integrations/clients).
- We use the LOCAL client during development and swap to the REAL_HTTP client when credentials are set.

Switching implementations:
- The selection of mock vs real clients should happen in ONE place (visioncare/api/main.py).
"""

from .contracts.records import EntityKind, FetchError, LoadState, Record, check_values_grid, normalize_header, parse_sheet_values

__all__ = [
    "EntityKind",
    "FetchError",
    "LoadState",
    "Record",
    "check_values_grid",
    "normalize_header",
    "parse_sheet_values",
]
