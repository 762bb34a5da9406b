"""Extract sold-listing summaries (slutpriser) from a sold search page."""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import Tag

from ..models import SoldListingSummary
from ..utils import absolute_url, normalize_whitespace
from .base import (
    MAX_RESULTS,
    PARSE_ERRORS,
    cascade,
    first_text,
    logger,
    parse_html,
    search_group,
    text_of,
)

# URL segment -> property type reported for the sale.
SOLD_PROPERTY_TYPES = {
    "lagenhet": "lägenhet",
    "villa": "villa",
    "radhus": "radhus",
    "fritidshus": "fritidshus",
    "tomt": "tomt",
}

SOLD_LINK_SELECTOR = ", ".join(
    f'a[href*="/salda/{segment}-"]' for segment in SOLD_PROPERTY_TYPES
)
SOLD_PATH = "/salda/"

AGENCY_LOGO_SELECTOR = ", ".join(
    f'img[alt*="{keyword}"]'
    for keyword in ("Mäklar", "Fastighet", "byrå", "Bjurfors", "Notar")
)

SOLD_PRICE_RE = re.compile(r"Slutpris\s+([\d\s]+)\s*kr", re.IGNORECASE)
PRICE_CHANGE_RE = re.compile(r"([+\-±]\s*\d+(?:[,.]\d+)?)\s*%")
ROOMS_RE = re.compile(r"(\d+(?:[,.]\d+)?)\s*rum")
AREA_ONLY_RE = re.compile(r"^(\d+(?:[+,]\d+)?)\s*m²$")
AREA_RE = re.compile(r"(\d+(?:\+\d+)?(?:,\d+)?)\s*m²(?!\s*Slutpris)")
PRICE_PER_SQM_RE = re.compile(r"([\d\s]+)\s*kr/m²")
FEE_RE = re.compile(r"([\d\s]+)\s*kr/mån")
SALE_DATE_RE = re.compile(r"Såld\s+(\d+\s+\w+\.?\s+\d{4})")


def _digits_with_unit(pattern: re.Pattern[str], text: str, unit: str) -> str:
    """Normalize a matched digit run to ``"1 234 unit"``."""
    match = pattern.search(text)
    if not match:
        return ""
    digits = normalize_whitespace(match.group(1))
    return f"{digits} {unit}" if digits else ""


def _property_type(href: str) -> str:
    for segment, property_type in SOLD_PROPERTY_TYPES.items():
        if f"/{segment}-" in href:
            return property_type
    return ""


def _price_change(text: str) -> str:
    match = PRICE_CHANGE_RE.search(text)
    if not match:
        return ""
    return re.sub(r"\s", "", match.group(1)) + "%"


def _area_from_paragraph(anchor: Tag) -> str:
    for paragraph in anchor.find_all("p"):
        match = AREA_ONLY_RE.match(text_of(paragraph))
        if match:
            return match.group(0)
    return ""


def _area_from_text(anchor: Tag) -> str:
    match = AREA_RE.search(anchor.get_text())
    if match and "kr" not in match.group(0):
        return match.group(0)
    return ""


AREA_STRATEGIES = (_area_from_paragraph, _area_from_text)


def _agency(anchor: Tag) -> str:
    logo = anchor.select_one(AGENCY_LOGO_SELECTOR)
    return (logo.get("alt") or "") if logo is not None else ""


def _sold_from_anchor(anchor: Tag, location_name: str) -> Optional[SoldListingSummary]:
    href = anchor.get("href")
    if not href or SOLD_PATH not in href:
        return None

    all_text = anchor.get_text()
    return SoldListingSummary(
        address=first_text(anchor, "h2"),
        location=location_name,
        sold_price=_digits_with_unit(SOLD_PRICE_RE, all_text, "kr"),
        price_change_percent=_price_change(all_text),
        sale_date=search_group(SALE_DATE_RE, all_text, 1),
        rooms=search_group(ROOMS_RE, all_text, 1),
        area=cascade(anchor, AREA_STRATEGIES, ""),
        price_per_sqm=_digits_with_unit(PRICE_PER_SQM_RE, all_text, "kr/m²"),
        monthly_fee=_digits_with_unit(FEE_RE, all_text, "kr/mån"),
        property_type=_property_type(href),
        agency=_agency(anchor),
        url=absolute_url(href),
    )


def extract_sold_summaries(
    html: Optional[str], location_name: str
) -> List[SoldListingSummary]:
    """Return at most 25 sold listings in document order."""
    soup = parse_html(html)
    listings: List[SoldListingSummary] = []
    for anchor in soup.select(SOLD_LINK_SELECTOR)[:MAX_RESULTS]:
        try:
            sold = _sold_from_anchor(anchor, location_name)
        except PARSE_ERRORS as exc:
            logger.debug("Skipping malformed sold listing card: %s", exc)
            continue
        if sold is not None:
            listings.append(sold)
    return listings
