# src/credport/importers/dashlane.py

from .base import CsvParser


class DashlaneCsvParser(CsvParser):
    """credentials.csv: username,username2,username3,title,password,note,url,category,otpSecret"""

    label = "Dashlane CSV"
    FIELD_ALIASES = {
        "username": ("username", "login", "email"),
        "site": ("title",),
        "password": ("password",),
        "notes": ("note",),
        "url": ("url",),
        "folder": ("category",),
    }
    # Secondary logins have no place in the canonical record
    DISCARDED = frozenset({"username2", "username3", "otpsecret", "otpurl"})
