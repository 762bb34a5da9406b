"""Utilities shared by the Hemnet fetcher and extractors."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlparse


HEMNET_BASE_URL = "https://www.hemnet.se"

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "sv-SE,sv;q=0.9,en-US;q=0.8,en;q=0.7",
}


def normalize_whitespace(value: str) -> str:
    """Collapse repeated spaces, non-breaking spaces and newlines."""
    return re.sub(r"\s+", " ", value).strip()


def absolute_url(href: str) -> str:
    """Resolve a link from a Hemnet page against the Hemnet origin."""
    return urljoin(HEMNET_BASE_URL, href)


def is_hemnet_image(url: Optional[str]) -> bool:
    """True for absolute URLs served from one of Hemnet's image hosts."""
    if not url or not url.startswith("http"):
        return False
    host = urlparse(url).hostname or ""
    return "hemnet" in host


def first_srcset_url(srcset: Optional[str]) -> str:
    """Return the URL of the first candidate in a ``srcset`` attribute."""
    if not srcset:
        return ""
    first = srcset.split(",")[0].strip()
    return first.split()[0] if first else ""


def format_number(value: float | int) -> str:
    """Render query numbers without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
