import pytest

from visioncare.integrations.contracts.records import Record, normalize_header, parse_sheet_values


def test_normalize_header_lowercases_trims_and_joins_whitespace():
    assert normalize_header("  Frame   Color ") == "frame_color"
    assert normalize_header("Image URL 1") == "image_url_1"
    assert normalize_header("Brand\tName") == "brand_name"


def test_parse_sheet_values_assigns_spreadsheet_row_numbers():
    records = parse_sheet_values([["Name"], ["A"], [], ["C"]])

    assert [r.row_id for r in records] == [2, 3, 4]
    assert records[1].to_dict() == {"name": ""}


def test_parse_sheet_values_handles_missing_grid():
    assert parse_sheet_values(None) == []
    assert parse_sheet_values([]) == []
    assert parse_sheet_values([[], ["orphan"]]) == []


def test_record_get_falls_back_on_missing_or_blank():
    record = Record(row_id=2, fields={"name": "Aviator", "brand": ""})

    assert record.get("name") == "Aviator"
    assert record.get("brand", "N/A") == "N/A"
    assert record.get("color", "Not specified") == "Not specified"


def test_record_json_round_trip_preserves_identity():
    record = Record(row_id=7, fields={"product_name": "Café Round"})
    assert Record.from_json(record.to_json()) == record


@pytest.mark.parametrize("raw", ["not json", "[]", '{"fields": {}}', '{"row_id": "2", "fields": {}}', '{"row_id": 2}'])
def test_record_from_json_rejects_malformed_payloads(raw):
    with pytest.raises(ValueError):
        Record.from_json(raw)
