from __future__ import annotations

import pytest

from pipedash.core.exceptions import FileRejectedError, ValidationError
from pipedash.importing.parser import parse_csv, preview_csv, validate_upload
from pipedash.importing.registry import detect_schema, get_schema
from pipedash.importing.validation import validate_rows


def test_upload_gate_rejects_oversized_files():
    with pytest.raises(FileRejectedError) as exc:
        validate_upload("deals.csv", b"x" * 11, max_bytes=10)
    assert exc.value.reason == "size"


def test_upload_gate_rejects_non_csv_files():
    with pytest.raises(FileRejectedError) as exc:
        validate_upload("deals.xlsx", b"name\nAcme\n", content_type="application/octet-stream")
    assert exc.value.reason == "format"


def test_upload_gate_accepts_csv_content_type_and_strips_bom():
    assert validate_upload("export.txt", b"name\nAcme\n", content_type="text/csv; charset=utf-8") == "name\nAcme\n"
    assert validate_upload("deals.csv", b"\xef\xbb\xbfname\nAcme\n") == "name\nAcme\n"


def test_upload_gate_rejects_non_utf8_content():
    with pytest.raises(FileRejectedError) as exc:
        validate_upload("deals.csv", b"name\n\xff\xfe\n")
    assert exc.value.reason == "encoding"


def test_parse_csv_handles_quotes_commas_and_blank_rows():
    text = 'name,notes\n"Acme, Inc","He said ""hi"""\n,\n\nBeta,plain\n'
    parsed = parse_csv(text)
    assert parsed.headers == ["name", "notes"]
    assert parsed.rows == [
        {"name": "Acme, Inc", "notes": 'He said "hi"'},
        {"name": "Beta", "notes": "plain"},
    ]


def test_parse_csv_keeps_cells_as_text():
    parsed = parse_csv("id,value\n007,NA\n")
    assert parsed.rows == [{"id": "007", "value": "NA"}]


def test_parse_csv_rejects_rows_wider_than_the_header():
    with pytest.raises(ValidationError, match="Could not parse CSV"):
        parse_csv("name,email\nAcme,a@x.com,EXTRA\n")
    with pytest.raises(ValidationError):
        parse_csv("name,email\nBeta,b@x.com\nAcme,a@x.com,EXTRA\n")


def test_parse_csv_pads_short_rows_and_renames_duplicate_headers():
    parsed = parse_csv("name,name,email\nAcme,Acme Inc\n")
    assert parsed.headers == ["name", "name.1", "email"]
    assert parsed.rows == [{"name": "Acme", "name.1": "Acme Inc", "email": ""}]


def test_parse_csv_empty_input():
    assert parse_csv("").headers == []
    assert len(parse_csv("name,email\n")) == 0


def test_preview_limits_rows_and_detects_schema():
    text = "name,email\n" + "".join(f"User {i},user{i}@example.com\n" for i in range(12))
    preview = preview_csv(text, max_rows=5)
    assert preview.headers == ["name", "email"]
    assert len(preview.rows) == 5
    assert preview.total_rows == 12
    assert preview.detected_schema == "users"


def test_detect_schema():
    assert detect_schema(["client_name", "project_name"]) == "projects"
    assert detect_schema(["Name", "Legal_Name"]) == "clients"
    assert detect_schema(["Deal Name", "Value", "Stage", "Notes"]) == "deals"
    assert detect_schema(["foo"]) is None


def test_validation_reports_missing_values_and_usable_ratio():
    headers = ["Company Name", "Industry"]
    rows = [
        {"Company Name": "Acme", "Industry": "Tech"},
        {"Company Name": "Beta", "Industry": "Retail"},
        {"Company Name": "", "Industry": "Retail"},
        {"Company Name": "", "Industry": "Energy"},
    ]
    report = validate_rows(headers, rows, get_schema("clients"))
    assert report.missing_columns == []
    assert report.errors == [
        "Row 4: Missing required field 'name'",
        "Row 5: Missing required field 'name'",
    ]
    assert report.summary.valid_rows == 2
    assert report.summary.missing_fields == 2
    assert report.can_continue is True
    assert report.is_valid is False


def test_validation_blocks_when_fewer_than_half_rows_are_usable():
    rows = [{"name": "", "industry": "Tech"}, {"name": "", "industry": "Retail"}, {"name": "Acme", "industry": ""}]
    report = validate_rows(["name", "industry"], rows, get_schema("clients"))
    assert report.summary.valid_rows == 1
    assert report.can_continue is False


def test_missing_required_columns_are_warnings():
    rows = [{"Title": "Website"}, {"Title": "Portal"}]
    report = validate_rows(["Title"], rows, get_schema("projects"))
    assert report.missing_columns == ["name", "client_name"]
    assert report.errors == []
    assert report.warnings[0].startswith("Missing required columns: name, client_name")
    assert report.can_continue is True
    assert report.is_valid is False


def test_duplicates_are_detected_case_insensitively():
    rows = [{"name": "Acme"}, {"name": "ACME "}, {"name": "Beta"}]
    report = validate_rows(["name"], rows, get_schema("clients"))
    assert report.summary.duplicates == 1
    assert report.warnings == ["Row 3: Duplicate entry 'acme' (will be skipped)"]
    assert report.is_valid is True


def test_empty_file_cannot_continue():
    report = validate_rows(["name"], [], get_schema("clients"))
    assert report.can_continue is False
    assert report.is_valid is False
