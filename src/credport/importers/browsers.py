# src/credport/importers/browsers.py
"""Password exports of Chrome, Firefox and Safari."""

from typing import Dict, List, Optional

from credport.common.models import CanonicalCredential
from credport.common.urls import extract_domain
from .base import CsvParser


class ChromeCsvParser(CsvParser):
    """name,url,username,password,note"""

    label = "Chrome CSV"
    FIELD_ALIASES = {
        "site": ("name",),
        "url": ("url",),
        "username": ("username",),
        "password": ("password",),
        "notes": ("note",),
    }


class FirefoxCsvParser(CsvParser):
    """url,username,password,httpRealm,formActionOrigin,guid,timeCreated,timeLastUsed,timePasswordChanged"""

    label = "Firefox CSV"
    FIELD_ALIASES = {
        "url": ("url",),
        "username": ("username",),
        "password": ("password",),
    }
    DISCARDED = frozenset({
        "httprealm", "formactionorigin", "guid",
        "timecreated", "timelastused", "timepasswordchanged",
    })
    REQUIRED = (("password",), ("username",), ("url",))

    def build(self, values: Dict[str, str], row_no: int, warnings: List[str]) -> Optional[CanonicalCredential]:
        url = self.field(values, "url")
        return CanonicalCredential(
            site=extract_domain(url) or url or "",
            username=self.field(values, "username") or "",
            password=self.field(values, "password") or "",
            url=url,
        )


class SafariCsvParser(CsvParser):
    """Title,URL,Username,Password,Notes,OTPAuth"""

    label = "Safari CSV"
    FIELD_ALIASES = {
        "site": ("title",),
        "url": ("url",),
        "username": ("username",),
        "password": ("password",),
        "notes": ("notes",),
    }
    DISCARDED = frozenset({"otpauth"})
