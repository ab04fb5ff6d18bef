# src/credport/common/urls.py

import re
from typing import Optional
from urllib.parse import urlsplit

_WHITESPACE = re.compile(r"\s")


def extract_domain(url: Optional[str]) -> Optional[str]:
    """Returns the host part of a URL, or None when there isn't one."""
    if not url:
        return None
    url = url.strip()
    try:
        parts = urlsplit(url)
        if parts.scheme and parts.hostname:
            return parts.hostname
    except ValueError:
        pass

    # Fallback for URLs urlsplit rejects (bad ports, stray brackets)
    if "://" in url:
        domain = url.split("://", 1)[1].split("/", 1)[0]
        domain = domain.rsplit("@", 1)[-1].split(":", 1)[0]
        if domain:
            return domain.lower()
    return None


def is_absolute_url(url: str) -> bool:
    """True for a syntactically well-formed absolute URL (scheme + host)."""
    if not url or _WHITESPACE.search(url):
        return False
    try:
        parts = urlsplit(url)
        # Accessing .port validates the port number
        parts.port
    except ValueError:
        return False
    if not re.fullmatch(r"[A-Za-z][A-Za-z0-9+.\-]*", parts.scheme or ""):
        return False
    return bool(parts.netloc and parts.hostname)
