# src/credport/importers/keepass.py

import xml.etree.ElementTree as ET
from typing import List

from credport.common.errors import FormatError
from credport.common.models import CanonicalCredential, ParseResult
from credport.common.urls import extract_domain
from .base import BaseParser, Content, CsvParser, clean, read_text, split_tags

RECYCLE_BIN_NAMES = {"Recycle Bin"}
STANDARD_KEYS = {"Title", "UserName", "Password", "URL", "Notes"}


class KeePassCsvParser(CsvParser):
    """KeePassXC (Group,Title,Username,Password,URL,Notes,...) and KeePass 2 (Account,Login Name,...) CSV."""

    label = "KeePass CSV"
    FIELD_ALIASES = {
        "folder": ("group",),
        "site": ("title", "account"),
        "username": ("username", "login name"),
        "password": ("password",),
        "url": ("url", "web site"),
        "notes": ("notes", "comments"),
    }
    DISCARDED = frozenset({"totp", "icon", "last modified", "created"})


class KeePassXmlParser(BaseParser):
    """KeePass 2.x XML export (KeePassFile/Root/Group/Entry)."""

    label = "KeePass XML"

    def parse(self, content: Content, extension: str) -> ParseResult:
        text = read_text(content, self.label)
        if not text.strip():
            raise FormatError(f"{self.label}: file is empty")
        try:
            # Bytes, so an <?xml encoding=...?> declaration is accepted
            root = ET.fromstring(text.encode("utf-8"))
        except ET.ParseError as e:
            raise FormatError(f"{self.label}: malformed XML ({e})") from e
        if root.tag != "KeePassFile":
            raise FormatError(f"{self.label}: expected a <KeePassFile> document, found <{root.tag}>")
        top = root.find("Root")
        if top is None:
            raise FormatError(f"{self.label}: missing <Root> element")

        warnings: List[str] = []
        candidates: List[CanonicalCredential] = []
        unknown_seen = set()
        for group in top.findall("Group"):
            # The top-level group is the database itself, not a folder
            self._walk(group, [], candidates, warnings, unknown_seen)
        return ParseResult(candidates, warnings)

    def _walk(self, group: ET.Element, path: List[str], candidates, warnings, unknown_seen) -> None:
        for entry in group.findall("Entry"):
            candidates.append(self._convert_entry(entry, path, warnings, unknown_seen))
        for child in group.findall("Group"):
            name = (child.findtext("Name") or "").strip()
            if name in RECYCLE_BIN_NAMES:
                count = len(child.findall(".//Entry"))
                if count:
                    warnings.append(f"group '{name}': {count} deleted entries skipped")
                continue
            self._walk(child, path + [name] if name else path, candidates, warnings, unknown_seen)

    def _convert_entry(self, entry: ET.Element, path: List[str], warnings, unknown_seen) -> CanonicalCredential:
        # Only direct <String> children; <History> holds older revisions
        fields = {}
        for string in entry.findall("String"):
            key = (string.findtext("Key") or "").strip()
            value = string.findtext("Value") or ""
            if key not in STANDARD_KEYS:
                if key and key not in unknown_seen:
                    unknown_seen.add(key)
                    warnings.append(f"unrecognized field ignored: '{key}'")
                continue
            if key in fields:
                warnings.append(f"duplicate key '{key}' ignored")
                continue
            fields[key] = value

        url = clean(fields.get("URL"))
        return CanonicalCredential(
            site=clean(fields.get("Title")) or extract_domain(url) or "",
            username=clean(fields.get("UserName")) or "",
            password=fields.get("Password") or "",
            notes=clean(fields.get("Notes")),
            url=url,
            folder="/".join(path) or None,
            tags=split_tags(entry.findtext("Tags")),
        )
