"""
Selection handoff: carries the record a visitor clicked on a list page to the
matching detail page across a full page navigation.
"""

from __future__ import annotations

import logging
from typing import Optional

from visioncare.integrations.contracts.records import EntityKind, Record

logger = logging.getLogger(__name__)

SELECTION_KEYS = {
    EntityKind.PRODUCT: "selectedProduct",
    EntityKind.GALLERY: "selectedSurgery",
}

DETAIL_ROUTES = {
    EntityKind.PRODUCT: "/product-details",
    EntityKind.GALLERY: "/surgery-details",
}

SELECT_ROUTES = {
    EntityKind.PRODUCT: "/products/select/{row_id}",
    EntityKind.GALLERY: "/gallery/select/{row_id}",
}


class SelectionBridge:
    def __init__(self, store, ttl: int = 1800) -> None:
        self.store = store
        self.ttl = ttl

    def handoff(self, session_id: str, kind: EntityKind, record: Record) -> str:
        """Store the record for this visitor and return the detail route to navigate to."""
        self.store.set_value(session_id, SELECTION_KEYS[kind], record.to_json(), ttl=self.ttl)
        logger.info("Selected %s row %s for session %s", kind.value, record.row_id, session_id)
        return DETAIL_ROUTES[kind]

    def retrieve(self, session_id: Optional[str], kind: EntityKind) -> Optional[Record]:
        """Read and clear the stored selection; None when absent or malformed."""
        if not session_id:
            return None
        raw = self.store.pop_value(session_id, SELECTION_KEYS[kind])
        if not raw:
            return None
        try:
            return Record.from_json(raw)
        except ValueError as e:
            logger.warning("Discarding malformed %s selection for session %s: %s", kind.value, session_id, e)
            return None
