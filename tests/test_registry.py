# tests/test_registry.py

import pytest

from credport.common.errors import FormatError, SourceNotFoundError, UnsupportedExtensionError
from credport.common.models import CanonicalCredential, ParseResult
from credport.common.sources import list_sources
from credport.importers.base import BaseParser
from credport.importers.registry import ParserRegistry, normalize_extension


def test_every_declared_source_extension_has_a_parser():
    registry = ParserRegistry()
    pairs = set(registry.get_supported_pairs())
    for source in list_sources(include_generic=True):
        for extension in source.supported_extensions:
            assert (source.id, extension) in pairs


@pytest.mark.parametrize("raw, expected", [("csv", ".csv"), (".JSON", ".json"), (" .1pux ", ".1pux")])
def test_normalize_extension(raw, expected):
    assert normalize_extension(raw) == expected


def test_extension_not_accepted_by_source_is_rejected_before_parsing(mocker):
    registry = ParserRegistry()
    stray = mocker.Mock(spec=BaseParser)
    registry.register_parser("lastpass", ".json", stray)

    with pytest.raises(UnsupportedExtensionError) as excinfo:
        registry.parse(b"{}", "lastpass", ".json")

    assert isinstance(excinfo.value, FormatError)
    assert "LastPass" in str(excinfo.value)
    stray.parse.assert_not_called()


def test_missing_extension_is_rejected():
    with pytest.raises(UnsupportedExtensionError):
        ParserRegistry().get_parser("chrome", "")


def test_unknown_source_is_rejected():
    with pytest.raises(SourceNotFoundError):
        ParserRegistry().get_parser("roboform", ".csv")


def test_registered_parser_replaces_default():
    class FixedParser(BaseParser):
        label = "Fixed"

        def parse(self, content, extension):
            return ParseResult([CanonicalCredential("s", "u", "p")], ["fixed"])

    registry = ParserRegistry()
    registry.register_parser("chrome", "csv", FixedParser())

    candidates, warnings = registry.parse("anything", "chrome", ".CSV")
    assert candidates == [CanonicalCredential("s", "u", "p")]
    assert warnings == ["fixed"]
