# src/credport/common/sources.py
"""Catalog of the password managers and browsers credport can import from."""

from typing import Dict, List

from . import config
from .errors import SourceNotFoundError
from .models import ImportSource

GENERIC_SOURCE_ID = "generic"

_VENDOR_SOURCES = [
    ImportSource(
        id="lastpass",
        name="LastPass",
        description="Import from LastPass (.csv)",
        supported_extensions=frozenset({".csv"}),
        icon="🔐",
        color="red",
    ),
    ImportSource(
        id="bitwarden",
        name="Bitwarden",
        description="Import from Bitwarden (.json, .csv)",
        supported_extensions=frozenset({".json", ".csv"}),
        icon="🛡️",
        color="blue",
    ),
    ImportSource(
        id="1password",
        name="1Password",
        description="Import from 1Password (.1pux, .csv)",
        supported_extensions=frozenset({".1pux", ".csv"}),
        icon="🔑",
        color="indigo",
    ),
    ImportSource(
        id="chrome",
        name="Google Chrome",
        description="Import from Chrome (.csv)",
        supported_extensions=frozenset({".csv"}),
        icon="🌐",
        color="yellow",
    ),
    ImportSource(
        id="firefox",
        name="Mozilla Firefox",
        description="Import from Firefox (.csv)",
        supported_extensions=frozenset({".csv"}),
        icon="🦊",
        color="orange",
    ),
    ImportSource(
        id="safari",
        name="Safari",
        description="Import from Safari (.csv)",
        supported_extensions=frozenset({".csv"}),
        icon="🧭",
        color="blue",
    ),
    ImportSource(
        id="keepass",
        name="KeePass",
        description="Import from KeePass (.xml, .csv)",
        supported_extensions=frozenset({".xml", ".csv"}),
        icon="🔒",
        color="green",
    ),
    ImportSource(
        id="dashlane",
        name="Dashlane",
        description="Import from Dashlane (.csv)",
        supported_extensions=frozenset({".csv"}),
        icon="🎯",
        color="emerald",
    ),
]

_GENERIC_SOURCE = ImportSource(
    id=GENERIC_SOURCE_ID,
    name="Generic CSV / credport JSON",
    description="Import any site,username,password CSV or a credport JSON export",
    supported_extensions=frozenset({".csv", ".json"}),
    icon="📄",
    color="gray",
)

_REGISTRY: Dict[str, ImportSource] = {}


def register_source(source: ImportSource) -> None:
    """Adds a source to the catalog. Parsers are registered separately."""
    if not source.supported_extensions:
        raise ValueError(f"Source '{source.id}' declares no file extensions")
    unknown = source.supported_extensions - config.RECOGNIZED_EXTENSIONS
    if unknown:
        raise ValueError(f"Source '{source.id}' declares unrecognized extensions: {sorted(unknown)}")
    if ".csv" not in source.supported_extensions:
        raise ValueError(f"Source '{source.id}' must accept .csv")
    _REGISTRY[source.id] = source


def list_sources(include_generic: bool = False) -> List[ImportSource]:
    """Sources in display order; the generic fallback is hidden unless asked for."""
    return [s for s in _REGISTRY.values() if include_generic or s.id != GENERIC_SOURCE_ID]


def find_source(source_id: str) -> ImportSource:
    try:
        return _REGISTRY[source_id]
    except KeyError:
        raise SourceNotFoundError(f"Unknown import source: {source_id}") from None


for _source in _VENDOR_SOURCES + [_GENERIC_SOURCE]:
    register_source(_source)
