from visioncare.integrations.contracts.records import EntityKind, Record
from visioncare.site.selection import SELECTION_KEYS, SelectionBridge


def test_handoff_then_retrieve_returns_same_record(session_store):
    bridge = SelectionBridge(session_store)
    record = Record(row_id=4, fields={"product_name": "Titanium Frame"})

    target = bridge.handoff("sess-1", EntityKind.PRODUCT, record)

    assert target == "/product-details"
    assert session_store.get_value("sess-1", "selectedProduct") == record.to_json()
    assert bridge.retrieve("sess-1", EntityKind.PRODUCT) == record


def test_selection_is_cleared_after_read(session_store):
    bridge = SelectionBridge(session_store)
    bridge.handoff("sess-1", EntityKind.GALLERY, Record(row_id=2, fields={"surgery_name": "LASIK"}))

    assert bridge.retrieve("sess-1", EntityKind.GALLERY) is not None
    assert bridge.retrieve("sess-1", EntityKind.GALLERY) is None


def test_selections_are_scoped_per_kind_and_session(session_store):
    bridge = SelectionBridge(session_store)
    bridge.handoff("sess-1", EntityKind.PRODUCT, Record(row_id=2, fields={}))

    assert bridge.retrieve("sess-2", EntityKind.PRODUCT) is None
    assert bridge.retrieve("sess-1", EntityKind.GALLERY) is None
    assert bridge.retrieve("sess-1", EntityKind.PRODUCT).row_id == 2


def test_missing_session_or_malformed_value_yields_none(session_store):
    bridge = SelectionBridge(session_store)
    session_store.set_value("sess-1", SELECTION_KEYS[EntityKind.PRODUCT], "{not json")

    assert bridge.retrieve(None, EntityKind.PRODUCT) is None
    assert bridge.retrieve("sess-1", EntityKind.PRODUCT) is None
    # malformed value is discarded too
    assert session_store.get_value("sess-1", SELECTION_KEYS[EntityKind.PRODUCT]) is None
