"""Extract listing summaries from an active-listings search page."""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import Tag

from ..models import ListingSummary
from ..utils import absolute_url, first_srcset_url, is_hemnet_image
from .base import (
    MAX_RESULTS,
    PARSE_ERRORS,
    first_text,
    logger,
    parse_html,
    search_group,
    search_text_nodes,
)

LISTING_LINK_SELECTOR = 'a[href*="/bostad/"]'
LISTING_PATH = "/bostad/"
DESCRIPTION_LIMIT = 200

PRICE_RE = re.compile(r"(\d[\d\s]*\d)\s*kr(?!/)")
ROOMS_RE = re.compile(r"(\d+)\s*rum")
AREA_RE = re.compile(r"(\d+)\s*m²")
FEE_RE = re.compile(r"(\d[\d\s]*)\s*kr/mån")


def _image_src(image: Tag) -> str:
    return image.get("src") or ""


def _image_srcset(image: Tag) -> str:
    return first_srcset_url(image.get("srcset"))


def _image_data_src(image: Tag) -> str:
    return image.get("data-src") or ""


IMAGE_SOURCES = (_image_src, _image_srcset, _image_data_src)


def _thumbnail(anchor: Tag) -> str:
    """First Hemnet-hosted image URL, checking src, srcset then data-src."""
    for image in anchor.find_all("img"):
        for source in IMAGE_SOURCES:
            candidate = source(image)
            if is_hemnet_image(candidate):
                return candidate
    return ""


def _summary_from_anchor(anchor: Tag, location_name: str) -> Optional[ListingSummary]:
    href = anchor.get("href")
    if not href or LISTING_PATH not in href:
        return None

    all_text = anchor.get_text()
    return ListingSummary(
        title=first_text(anchor, "h2"),
        url=absolute_url(href),
        price=search_group(PRICE_RE, all_text),
        rooms=search_group(ROOMS_RE, all_text),
        area=search_group(AREA_RE, all_text),
        monthly_fee=search_text_nodes(anchor, FEE_RE),
        description=first_text(anchor, "p")[:DESCRIPTION_LIMIT],
        location=location_name,
        image_url=_thumbnail(anchor),
    )


def extract_summaries(html: Optional[str], location_name: str) -> List[ListingSummary]:
    """Return at most 25 listing summaries in document order."""
    soup = parse_html(html)
    listings: List[ListingSummary] = []
    for anchor in soup.select(LISTING_LINK_SELECTOR)[:MAX_RESULTS]:
        try:
            summary = _summary_from_anchor(anchor, location_name)
        except PARSE_ERRORS as exc:
            logger.debug("Skipping malformed listing card: %s", exc)
            continue
        if summary is not None:
            listings.append(summary)
    return listings
