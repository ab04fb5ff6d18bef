# src/credport/importers/bitwarden.py

from typing import Any, Dict, List, Optional

from credport.common.errors import FormatError
from credport.common.models import CanonicalCredential, ParseResult
from credport.common.urls import extract_domain
from .base import BaseParser, Content, CsvParser, clean, load_json

# Bitwarden item types (1 = login, 2 = secure note, 3 = card, 4 = identity)
LOGIN_TYPE = 1
ITEM_TYPE_NAMES = {1: "login", 2: "note", 3: "card", 4: "identity", 5: "ssh key"}

KNOWN_ITEM_KEYS = frozenset({
    "id", "organizationId", "folderId", "type", "reprompt", "name", "notes",
    "favorite", "login", "fields", "collectionIds", "revisionDate",
    "creationDate", "deletedDate", "passwordHistory", "secureNote", "card",
    "identity", "sshKey", "key",
})


class BitwardenCsvParser(CsvParser):
    """folder,favorite,type,name,notes,fields,reprompt,login_uri,login_username,login_password,login_totp"""

    label = "Bitwarden CSV"
    FIELD_ALIASES = {
        "folder": ("folder",),
        "site": ("name",),
        "notes": ("notes",),
        "url": ("login_uri",),
        "username": ("login_username",),
        "password": ("login_password",),
    }
    DISCARDED = frozenset({"favorite", "type", "fields", "reprompt", "login_totp", "collections"})

    def build(self, values: Dict[str, str], row_no: int, warnings: List[str]) -> Optional[CanonicalCredential]:
        item_type = values.get("type", "").strip().lower()
        if item_type and item_type != "login":
            warnings.append(f"row {row_no}: skipped non-login item ({item_type})")
            return None
        # Several URIs are exported comma-separated in one cell
        url = self.field(values, "url")
        if url:
            url = url.split(",")[0].strip() or None
        return CanonicalCredential(
            site=self.field(values, "site") or extract_domain(url) or "",
            username=self.field(values, "username") or "",
            password=self.field(values, "password") or "",
            notes=self.field(values, "notes"),
            url=url,
            folder=self.field(values, "folder"),
        )


class BitwardenJsonParser(BaseParser):
    """Unencrypted Bitwarden JSON export: items[].login.{username,password,uris[]}"""

    label = "Bitwarden JSON"

    def parse(self, content: Content, extension: str) -> ParseResult:
        warnings: List[str] = []
        document = load_json(content, self.label, warnings)
        if not isinstance(document, dict):
            raise FormatError(f"{self.label}: expected a JSON object at the top level")
        if document.get("encrypted") is True:
            raise FormatError(f"{self.label}: encrypted exports are not supported, export as unencrypted JSON")
        items = document.get("items")
        if not isinstance(items, list):
            raise FormatError(f"{self.label}: missing 'items' list")

        folders = self._folder_names(document.get("folders"))
        unknown_seen = set()
        candidates: List[CanonicalCredential] = []

        for index, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                warnings.append(f"item {index}: not an object, skipped")
                continue
            for key in item:
                if key not in KNOWN_ITEM_KEYS and key not in unknown_seen:
                    unknown_seen.add(key)
                    warnings.append(f"unrecognized field ignored: '{key}'")

            login = item.get("login")
            if item.get("type", LOGIN_TYPE) != LOGIN_TYPE or not isinstance(login, dict):
                item_type = item.get("type")
                kind = ITEM_TYPE_NAMES.get(item_type, str(item_type)) if isinstance(item_type, int) else str(item_type)
                warnings.append(f"item {index}: skipped non-login item ({kind})")
                continue

            url = self._first_uri(login.get("uris"))
            password = login.get("password")
            candidates.append(CanonicalCredential(
                site=clean(item.get("name")) or extract_domain(url) or "",
                username=clean(login.get("username")) or "",
                password=password if isinstance(password, str) else "",
                notes=clean(item.get("notes")),
                url=url,
                folder=folders.get(item.get("folderId")) if isinstance(item.get("folderId"), str) else None,
            ))

        return ParseResult(candidates, warnings)

    @staticmethod
    def _folder_names(folders: Any) -> Dict[str, str]:
        if not isinstance(folders, list):
            return {}
        return {
            f["id"]: f["name"]
            for f in folders
            if isinstance(f, dict) and isinstance(f.get("id"), str) and clean(f.get("name"))
        }

    @staticmethod
    def _first_uri(uris: Any) -> Optional[str]:
        if not isinstance(uris, list):
            return None
        for entry in uris:
            if isinstance(entry, dict) and clean(entry.get("uri")):
                return clean(entry.get("uri"))
        return None
