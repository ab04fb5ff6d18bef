# src/credport/importers/registry.py
"""Dispatch table from (source id, file extension) to a parser."""

import logging
from typing import Dict, List, Tuple

from credport.common.errors import UnsupportedExtensionError
from credport.common.models import ParseResult
from credport.common.sources import GENERIC_SOURCE_ID, find_source
from .base import BaseParser, Content

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Maps (source id, extension) pairs to parser instances."""

    def __init__(self):
        self._parsers: Dict[Tuple[str, str], BaseParser] = {}
        self._register_default_parsers()

    def _register_default_parsers(self) -> None:
        from .bitwarden import BitwardenCsvParser, BitwardenJsonParser
        from .browsers import ChromeCsvParser, FirefoxCsvParser, SafariCsvParser
        from .dashlane import DashlaneCsvParser
        from .generic import CredportJsonParser, GenericCsvParser
        from .keepass import KeePassCsvParser, KeePassXmlParser
        from .lastpass import LastPassCsvParser
        from .onepassword import OnePasswordCsvParser, OnePuxParser

        self.register_parser("lastpass", ".csv", LastPassCsvParser())
        self.register_parser("bitwarden", ".csv", BitwardenCsvParser())
        self.register_parser("bitwarden", ".json", BitwardenJsonParser())
        self.register_parser("1password", ".csv", OnePasswordCsvParser())
        self.register_parser("1password", ".1pux", OnePuxParser())
        self.register_parser("chrome", ".csv", ChromeCsvParser())
        self.register_parser("firefox", ".csv", FirefoxCsvParser())
        self.register_parser("safari", ".csv", SafariCsvParser())
        self.register_parser("keepass", ".csv", KeePassCsvParser())
        self.register_parser("keepass", ".xml", KeePassXmlParser())
        self.register_parser("dashlane", ".csv", DashlaneCsvParser())
        self.register_parser(GENERIC_SOURCE_ID, ".csv", GenericCsvParser())
        self.register_parser(GENERIC_SOURCE_ID, ".json", CredportJsonParser())

    def register_parser(self, source_id: str, extension: str, parser: BaseParser) -> None:
        self._parsers[(source_id, normalize_extension(extension))] = parser

    def get_parser(self, source_id: str, extension: str) -> BaseParser:
        """
        Selects the parser for a source and extension.

        Raises SourceNotFoundError for an unknown source and
        UnsupportedExtensionError when the source does not accept the extension.
        """
        source = find_source(source_id)
        extension = normalize_extension(extension)
        if not source.accepts(extension):
            accepted = ", ".join(sorted(source.supported_extensions))
            raise UnsupportedExtensionError(
                f"{source.name} does not accept '{extension}' files (supported: {accepted})"
            )
        parser = self._parsers.get((source_id, extension))
        if parser is None:
            raise UnsupportedExtensionError(f"No parser registered for {source.name} '{extension}' files")
        return parser

    def get_supported_pairs(self) -> List[Tuple[str, str]]:
        return list(self._parsers.keys())

    def parse(self, content: Content, source_id: str, extension: str) -> ParseResult:
        parser = self.get_parser(source_id, extension)
        logger.debug("Parsing %s file with %s", extension, type(parser).__name__)
        result = parser.parse(content, normalize_extension(extension))
        logger.info("%s: %d candidates, %d warnings", parser.label, len(result.candidates), len(result.warnings))
        return result


def normalize_extension(extension: str) -> str:
    extension = (extension or "").strip().lower()
    if not extension:
        raise UnsupportedExtensionError("File has no extension")
    return extension if extension.startswith(".") else f".{extension}"


_default_registry = None


def default_registry() -> ParserRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = ParserRegistry()
    return _default_registry


def parse_file(content: Content, source_id: str, extension: str) -> ParseResult:
    """Parses a vendor export into candidate credentials and warnings."""
    return default_registry().parse(content, source_id, extension)
