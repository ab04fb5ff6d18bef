# tests/test_validator.py

import pytest

from credport.common.errors import InvalidOptionsError
from credport.common.models import CanonicalCredential, ImportOptions
from credport.pipeline.validator import inspect, validate

from conftest import make_credential


def test_missing_site_scenario():
    valid, warnings = validate([CanonicalCredential(site="", username="user", password="pass")], ImportOptions())

    assert valid == []
    assert warnings == ["missing site"]


@pytest.mark.parametrize("fields, expected", [
    ({"site": "  "}, ["missing site"]),
    ({"username": ""}, ["missing username"]),
    ({"password": ""}, ["missing password"]),
    ({"site": "", "username": " ", "password": ""}, ["missing site", "missing username", "missing password"]),
])
def test_one_warning_per_missing_field(fields, expected):
    valid, warnings = validate([make_credential(**fields)], ImportOptions())

    assert valid == []
    assert warnings == expected


def test_whitespace_password_is_not_missing():
    valid, warnings = validate([make_credential(password="        ")], ImportOptions())
    assert len(valid) == 1
    assert warnings == []


def test_bad_url_and_weak_password_only_warn():
    candidate = make_credential(password="short", url="not a url")
    valid, warnings = validate([candidate], ImportOptions())

    assert valid == [candidate]
    assert warnings == ["weak password (< 8 characters)", "invalid url: not a url"]


def test_url_check_can_be_disabled():
    valid, warnings = validate([make_credential(url="example.com/login")], ImportOptions(validate_urls=False))
    assert len(valid) == 1
    assert warnings == []


@pytest.mark.parametrize("url", ["https://example.com", "http://localhost:8080/x", "ftp://files.example.org"])
def test_absolute_urls_pass(url):
    _, warnings = validate([make_credential(url=url)], ImportOptions())
    assert warnings == []


@pytest.mark.parametrize("url", ["example.com", "https://", "https://exa mple.com", "http://host:99999"])
def test_malformed_urls_warn(url):
    _, warnings = validate([make_credential(url=url)], ImportOptions())
    assert warnings == [f"invalid url: {url}"]


def test_notes_cleared_when_not_imported():
    original = make_credential(notes="secret notes")
    valid, _ = validate([original], ImportOptions(import_notes=False))

    assert valid[0].notes is None
    # Candidates are never changed in place
    assert original.notes == "secret notes"


def test_order_is_preserved_and_indices_reported():
    candidates = [make_credential(site="a"), make_credential(site=""), make_credential(site="c")]
    valid, _ = validate(candidates, ImportOptions())
    findings = inspect(candidates, ImportOptions())

    assert [c.site for c in valid] == ["a", "c"]
    assert [(f.index, f.message, f.fatal) for f in findings] == [(1, "missing site", True)]


@pytest.mark.parametrize("options", [None, {"skip_duplicates": True}])
def test_malformed_options_raise(options):
    with pytest.raises(InvalidOptionsError):
        validate([make_credential()], options)


def test_options_reject_non_bool_flags():
    with pytest.raises(InvalidOptionsError):
        ImportOptions(skip_duplicates="yes")
