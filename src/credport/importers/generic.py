# src/credport/importers/generic.py

from typing import List

from credport.common.errors import FormatError
from credport.common.models import CanonicalCredential, ParseResult
from .base import BaseParser, Content, CsvParser, clean, load_json


class GenericCsvParser(CsvParser):
    """Any CSV with recognisable site/username/password columns."""

    label = "CSV"
    FIELD_ALIASES = {
        "site": ("site", "name", "title", "service", "domain"),
        "username": ("username", "user", "login", "email"),
        "password": ("password", "pass", "pwd"),
        "url": ("url", "website", "link"),
        "notes": ("notes", "note", "comment", "description"),
        "folder": ("folder", "group", "category"),
        "tags": ("tags",),
    }
    # Metadata columns written by credport's own CSV export
    DISCARDED = frozenset({"id", "created_at"})


class CredportJsonParser(BaseParser):
    """Reads back the document produced by the JSON exporter."""

    label = "credport JSON"

    def parse(self, content: Content, extension: str) -> ParseResult:
        warnings: List[str] = []
        document = load_json(content, self.label, warnings)
        if not isinstance(document, dict) or not isinstance(document.get("passwords"), list):
            raise FormatError(f"{self.label}: expected an object with a 'passwords' list")

        known = {"site", "username", "password", "notes", "url", "folder", "tags", "id", "created_at"}
        unknown_seen = set()
        candidates: List[CanonicalCredential] = []

        for index, entry in enumerate(document["passwords"], start=1):
            if not isinstance(entry, dict):
                warnings.append(f"entry {index}: not an object, skipped")
                continue
            for key in entry:
                if key not in known and key not in unknown_seen:
                    unknown_seen.add(key)
                    warnings.append(f"unrecognized field ignored: '{key}'")
            tags = entry.get("tags")
            if isinstance(tags, list):
                tags = tuple(t for t in tags if isinstance(t, str)) or None
            else:
                tags = None
            password = entry.get("password")
            candidates.append(CanonicalCredential(
                site=clean(entry.get("site")) or "",
                username=clean(entry.get("username")) or "",
                password=password if isinstance(password, str) else "",
                notes=clean(entry.get("notes")),
                url=clean(entry.get("url")),
                folder=clean(entry.get("folder")),
                tags=tags,
            ))
        return ParseResult(candidates, warnings)
