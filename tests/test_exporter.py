# tests/test_exporter.py

import csv
import io
import json
from datetime import date, datetime, timezone

import pytest

from credport.common.errors import UnsupportedFormatError
from credport.common.exporter import (
    CredentialExporter,
    default_export_filename,
    export_csv,
    export_json,
    write_export,
)
from credport.common.models import ExportFormat, ExportOptions

from conftest import make_stored


@pytest.fixture
def records():
    return [
        make_stored("id-1", created_at="2023-01-01"),
        make_stored("id-2", created_at="2022-06-30", site="shop.example", username="bob",
                    password='has,comma "and quotes"\nand newline', notes="n", tags=("a", "b")),
    ]


def test_csv_with_metadata_scenario():
    document = export_csv([make_stored("id-1", created_at="2023-01-01")], ExportOptions(format="csv", include_metadata=True))

    assert document == "site,username,password,created_at\nexample.com,user@test.com,password123,2023-01-01\n"


def test_csv_without_metadata_has_no_created_at(records):
    header = export_csv(records, ExportOptions()).splitlines()[0]
    assert header == "site,username,password"


def test_csv_escapes_delimiters_quotes_and_newlines(records):
    document = export_csv(records, ExportOptions())

    assert '"has,comma ""and quotes""\nand newline"' in document
    rows = list(csv.reader(io.StringIO(document, newline="")))
    assert rows[2][2] == 'has,comma "and quotes"\nand newline'


def test_csv_preserves_input_order(records):
    rows = list(csv.reader(io.StringIO(export_csv(records[::-1], ExportOptions()), newline="")))
    assert [r[1] for r in rows[1:]] == ["bob", "user@test.com"]


def test_json_document_shape(records):
    exporter = CredentialExporter(now=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    document = json.loads(exporter.export(records, ExportOptions(format=ExportFormat.JSON)))

    assert document["exportedAt"] == "2024-05-01T12:00:00+00:00"
    assert document["version"] == "1.0"
    first, second = document["passwords"]
    assert first == {
        "site": "example.com", "username": "user@test.com", "password": "password123",
        "notes": None, "url": None, "folder": None, "tags": None,
    }
    assert second["tags"] == ["a", "b"]


def test_json_metadata_adds_id_and_created_at(records):
    document = json.loads(export_json(records, ExportOptions(include_metadata=True)))
    assert document["passwords"][0]["id"] == "id-1"
    assert document["passwords"][0]["created_at"] == "2023-01-01"


def test_export_csv_and_json_force_their_format(records):
    options = ExportOptions(format="json")
    assert export_csv(records, options).startswith("site,username,password")
    assert json.loads(export_json(records, ExportOptions(format="csv")))["version"] == "1.0"


def test_selected_ids_filter_keeps_snapshot_order(records):
    options = ExportOptions(selected_ids=frozenset({"id-2", "id-1", "missing"}))
    rows = list(csv.reader(io.StringIO(export_csv(records, options), newline="")))
    assert [r[1] for r in rows[1:]] == ["user@test.com", "bob"]

    only_second = export_csv(records, ExportOptions(selected_ids=frozenset({"id-2"})))
    assert "user@test.com" not in only_second


def test_empty_selection_exports_header_only(records):
    assert export_csv(records, ExportOptions(selected_ids=frozenset())) == "site,username,password\n"


@pytest.mark.parametrize("fmt", ["encrypted", "pdf", "xml", ExportFormat.PDF])
def test_reserved_and_unknown_formats_are_refused(records, fmt):
    with pytest.raises(UnsupportedFormatError):
        CredentialExporter().export(records, ExportOptions(format=fmt))


def test_password_protected_export_is_refused(records):
    with pytest.raises(UnsupportedFormatError):
        CredentialExporter().export(records, ExportOptions(password_protected=True))


def test_default_export_filename():
    assert default_export_filename("csv", date(2024, 5, 1)) == "credport-export-2024-05-01.csv"


def test_write_export_keeps_line_endings(tmp_path, records):
    document = export_csv(records, ExportOptions())
    path = write_export(document, tmp_path / "out" / "export.csv")
    assert path.read_bytes() == document.encode("utf-8")


def test_csv_quotes_rows_holding_carriage_returns():
    document = export_csv([make_stored("id-1", password="pa\rss word")], ExportOptions())

    assert document == 'site,username,password\n"example.com","user@test.com","pa\rss word"\n'
    rows = list(csv.reader(io.StringIO(document, newline="")))
    assert rows[1][2] == "pa\rss word"
