# src/credport/importers/lastpass.py

from typing import Dict, List, Optional

from credport.common.models import CanonicalCredential
from credport.common.urls import extract_domain
from .base import CsvParser

# LastPass stores secure notes with this placeholder instead of a real address
SECURE_NOTE_URL = "http://sn"


class LastPassCsvParser(CsvParser):
    """LastPass export: url,username,password,totp,extra,name,grouping,fav"""

    label = "LastPass CSV"
    FIELD_ALIASES = {
        "url": ("url",),
        "username": ("username",),
        "password": ("password",),
        "notes": ("extra",),
        "site": ("name",),
        "folder": ("grouping",),
    }
    DISCARDED = frozenset({"fav", "totp"})

    def build(self, values: Dict[str, str], row_no: int, warnings: List[str]) -> Optional[CanonicalCredential]:
        url = self.field(values, "url")
        if url and url.lower() == SECURE_NOTE_URL:
            url = None
        # The address is the stable identity; `name` is a free-form label
        site = extract_domain(url) or self.field(values, "site") or ""
        return CanonicalCredential(
            site=site,
            username=self.field(values, "username") or "",
            password=self.field(values, "password") or "",
            notes=self.field(values, "notes"),
            url=url,
            folder=self.field(values, "folder"),
        )
