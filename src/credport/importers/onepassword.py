# src/credport/importers/onepassword.py

import io
import zipfile
from typing import Any, List, Optional

from credport.common.errors import FormatError
from credport.common.models import CanonicalCredential, ParseResult
from credport.common.urls import extract_domain
from .base import BaseParser, Content, CsvParser, clean, load_json, split_tags

# Category UUIDs used inside .1pux archives
LOGIN_CATEGORY = "001"
PASSWORD_CATEGORY = "005"
EXPORT_DATA_NAME = "export.data"


class OnePasswordCsvParser(CsvParser):
    """1Password 8 (Title,Url,Username,Password,OTPAuth,Favorite,Archived,Tags,Notes) and 1Password 7 CSV."""

    label = "1Password CSV"
    FIELD_ALIASES = {
        "site": ("title",),
        "url": ("url", "website", "urls"),
        "username": ("username",),
        "password": ("password",),
        "notes": ("notes", "notesplain"),
        "tags": ("tags",),
    }
    DISCARDED = frozenset({"otpauth", "favorite", "archived", "type", "uuid", "vault"})


class OnePuxParser(BaseParser):
    """1Password Unencrypted Export: a ZIP archive holding `export.data` JSON."""

    label = "1Password 1PUX"

    def parse(self, content: Content, extension: str) -> ParseResult:
        warnings: List[str] = []
        document = self._read_export_data(content, warnings)
        accounts = document.get("accounts") if isinstance(document, dict) else None
        if not isinstance(accounts, list):
            raise FormatError(f"{self.label}: missing 'accounts' list in {EXPORT_DATA_NAME}")

        candidates: List[CanonicalCredential] = []
        for account in accounts:
            for vault in _as_list(account.get("vaults") if isinstance(account, dict) else None):
                if not isinstance(vault, dict):
                    continue
                attrs = vault.get("attrs") if isinstance(vault.get("attrs"), dict) else {}
                vault_name = clean(attrs.get("name"))
                for item in _as_list(vault.get("items")):
                    credential = self._convert_item(item, vault_name, warnings)
                    if credential is not None:
                        candidates.append(credential)
        return ParseResult(candidates, warnings)

    def _read_export_data(self, content: Content, warnings: List[str]) -> Any:
        if isinstance(content, str):
            raise FormatError(f"{self.label}: archive content must be read as bytes")
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                raw = archive.read(EXPORT_DATA_NAME)
        except zipfile.BadZipFile as e:
            raise FormatError(f"{self.label}: not a valid .1pux archive ({e})") from e
        except KeyError:
            raise FormatError(f"{self.label}: archive does not contain {EXPORT_DATA_NAME}") from None
        return load_json(raw, f"{self.label} {EXPORT_DATA_NAME}", warnings)

    def _convert_item(self, item: Any, vault_name: Optional[str], warnings: List[str]) -> Optional[CanonicalCredential]:
        if not isinstance(item, dict):
            return None
        overview = item.get("overview") if isinstance(item.get("overview"), dict) else {}
        details = item.get("details") if isinstance(item.get("details"), dict) else {}
        title = clean(overview.get("title")) or "untitled"

        if item.get("state") == "archived":
            warnings.append(f"item '{title}': archived item skipped")
            return None
        category = item.get("categoryUuid")
        if category not in (LOGIN_CATEGORY, PASSWORD_CATEGORY):
            warnings.append(f"item '{title}': skipped non-login item (category {category})")
            return None

        username, password = self._login_fields(details.get("loginFields"))
        if password is None and isinstance(details.get("password"), str):
            password = details["password"]

        url = clean(overview.get("url"))
        if url is None:
            for entry in _as_list(overview.get("urls")):
                if isinstance(entry, dict) and clean(entry.get("url")):
                    url = clean(entry.get("url"))
                    break

        tags = overview.get("tags")
        if isinstance(tags, list):
            tags = tuple(t.strip() for t in tags if isinstance(t, str) and t.strip()) or None
        else:
            tags = split_tags(clean(tags))
        return CanonicalCredential(
            site=clean(overview.get("title")) or extract_domain(url) or "",
            username=username or "",
            password=password or "",
            notes=clean(details.get("notesPlain")),
            url=url,
            folder=vault_name,
            tags=tags,
        )

    @staticmethod
    def _login_fields(fields: Any):
        username = password = None
        for entry in _as_list(fields):
            if not isinstance(entry, dict):
                continue
            designation = entry.get("designation")
            value = entry.get("value")
            if not isinstance(value, str):
                continue
            # First designated field wins
            if designation == "username" and username is None:
                username = value.strip() or None
            elif designation == "password" and password is None:
                password = value or None
        return username, password


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []
