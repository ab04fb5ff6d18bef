# tests/test_service.py

import json

import pytest

from credport import api
from credport.common.errors import StoreError
from credport.common.models import ExportOptions, ImportOptions
from credport.common.store import MemoryStore

from conftest import make_credential

THREE_LOGINS = (
    "url,username,password,extra,name,grouping,fav\n"
    "https://a.example,alice,password-a,,A,,0\n"
    "https://b.example,bob,password-b,,B,,0\n"
    "https://c.example,carol,password-c,,C,,0\n"
)


def test_reimport_with_skip_duplicates_is_idempotent(memory_store):
    first = api.import_file(THREE_LOGINS, "lastpass", ".csv", memory_store, ImportOptions(skip_duplicates=True))
    second = api.import_file(THREE_LOGINS, "lastpass", ".csv", memory_store, ImportOptions(skip_duplicates=True))

    assert (first.success, first.imported_count, first.skipped_count) == (True, 3, 0)
    assert (second.success, second.imported_count, second.skipped_count) == (True, 0, 3)
    assert len(second.duplicates) == 3
    assert len(memory_store.list_all()) == 3


def test_update_existing_overwrites_in_place(memory_store):
    api.import_file(THREE_LOGINS, "lastpass", ".csv", memory_store, ImportOptions())
    changed = THREE_LOGINS.replace("password-b", "rotated-password")

    outcome = api.import_file(changed, "lastpass", ".csv", memory_store, ImportOptions(update_existing=True))

    assert outcome.imported_count == 3
    assert outcome.skipped_count == 0
    stored = {r.username: r.password for r in memory_store.list_all()}
    assert stored == {"alice": "password-a", "bob": "rotated-password", "carol": "password-c"}


def test_format_error_yields_failed_outcome(memory_store):
    outcome = api.import_file(b"PK\x03\x04garbage", "1password", ".1pux", memory_store, ImportOptions())

    assert outcome.success is False
    assert outcome.imported_count == outcome.skipped_count == 0
    assert len(outcome.errors) == 1
    assert memory_store.list_all() == []


def test_unsupported_extension_yields_failed_outcome(memory_store):
    outcome = api.import_file("{}", "chrome", ".json", memory_store, ImportOptions())
    assert outcome.success is False


def test_invalid_records_become_warnings_not_failures(memory_store):
    content = (
        "url,username,password,extra,name,grouping,fav\n"
        "https://a.example,alice,password-a,,A,,0\n"
        "https://b.example,,password-b,,B,,0\n"
        "https://c.example,carol,short,,C,,0\n"
    )
    outcome = api.import_file(content, "lastpass", ".csv", memory_store, ImportOptions())

    assert outcome.success is True
    assert outcome.imported_count == 2
    assert outcome.warnings == [
        "entry 2 (b.example): missing username",
        "entry 3 (c.example): weak password (< 8 characters)",
    ]
    assert outcome.imported_count + outcome.skipped_count <= 3


def test_store_errors_are_collected_per_record(mocker):
    store = MemoryStore()
    real_insert = store.insert

    def flaky_insert(credential):
        if credential.site == "b.example":
            raise StoreError("disk full")
        return real_insert(credential)

    mocker.patch.object(store, "insert", side_effect=flaky_insert)
    outcome = api.import_file(THREE_LOGINS, "lastpass", ".csv", store, ImportOptions())

    assert outcome.success is True
    assert outcome.imported_count == 2
    assert outcome.errors == ["b.example: disk full"]
    assert sorted(r.username for r in store.list_all()) == ["alice", "carol"]


def test_prepare_import_does_not_touch_the_store(mocker):
    store = mocker.Mock()
    preview = api.prepare_import(THREE_LOGINS, "lastpass", ".csv", [], ImportOptions())

    assert len(preview.valid) == 3
    assert preview.plan.total == 3
    store.insert.assert_not_called()


def test_import_reads_the_store_snapshot_once(mocker):
    store = MemoryStore()
    spy = mocker.spy(store, "list_all")
    api.import_file(THREE_LOGINS, "lastpass", ".csv", store, ImportOptions())
    assert spy.call_count == 1


def test_csv_export_round_trips_through_generic_import(memory_store):
    tricky = (
        "url,username,password,extra,name,grouping,fav\n"
        "https://a.example,\"comma, user\",\"pass,\"\"quoted\"\"\nline\",,A,,0\n"
        "https://b.example,bob,  padded  ,,B,,0\n"
    )
    api.import_file(tricky, "lastpass", ".csv", memory_store, ImportOptions())
    records = memory_store.list_all()

    document = api.export_csv(records, ExportOptions(include_metadata=True))
    candidates, warnings = api.parse_file(document, "generic", ".csv")

    assert warnings == []
    assert [(c.site, c.username, c.password) for c in candidates] == [
        (r.site, r.username, r.password) for r in records
    ]


def test_json_export_round_trips_through_generic_import(memory_store):
    api.import_file(THREE_LOGINS, "lastpass", ".csv", memory_store, ImportOptions())
    records = memory_store.list_all()

    document = api.export_json(records, ExportOptions(include_metadata=True))
    candidates, warnings = api.parse_file(document.encode("utf-8"), "generic", ".json")

    assert warnings == []
    assert [c.to_dict() for c in candidates] == [r.credential.to_dict() for r in records]
    assert json.loads(document)["version"] == "1.0"


@pytest.mark.parametrize("password", ["pa\rss word", "line one\r\nline two", "trailing\r"])
def test_csv_round_trip_keeps_carriage_returns(memory_store, password):
    memory_store.insert(make_credential(site="a.example", username="u", password=password))

    document = api.export_csv(memory_store.list_all(), ExportOptions())
    candidates, warnings = api.parse_file(document, "generic", ".csv")

    assert warnings == []
    assert [(c.site, c.username, c.password) for c in candidates] == [("a.example", "u", password)]


def test_unreadable_store_yields_failed_outcome(mocker):
    store = MemoryStore()
    mocker.patch.object(store, "list_all", side_effect=StoreError("vault unreadable"))
    mock_insert = mocker.patch.object(store, "insert")

    outcome = api.import_file(THREE_LOGINS, "lastpass", ".csv", store, ImportOptions())

    assert outcome.success is False
    assert outcome.errors == ["cannot read credential store: vault unreadable"]
    mock_insert.assert_not_called()


def test_unknown_source_yields_failed_outcome(memory_store):
    outcome = api.import_file(THREE_LOGINS, "roboform", ".csv", memory_store, ImportOptions())

    assert outcome.success is False
    assert outcome.errors == ["Unknown import source: roboform"]
    assert memory_store.list_all() == []
