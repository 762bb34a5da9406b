"""Extract the full detail record from a single Hemnet listing page."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup

from ..models import Coordinates, ListingDetail
from ..utils import absolute_url
from .base import (
    cascade,
    first_text,
    parse_html,
    search_group,
    text_nodes,
    text_of,
    unique,
    visible_string,
)

MAX_IMAGES = 10
DESCRIPTION_MIN_LENGTH = 200

# Labels of the dt/dd facts table on a listing page.
TERMS = {
    "property_type": "Bostadstyp",
    "tenure_type": "Upplåtelseform",
    "rooms": "Antal rum",
    "area": "Boarea",
    "balcony": "Balkong",
    "patio": "Uteplats",
    "floor": "Våning",
    "build_year": "Byggår",
    "energy_class": "Energiklass",
    "monthly_fee": "Avgift",
    "running_costs": "Driftkostnad",
    "price_per_sqm": "Pris/m²",
    "visit_count": "Antal besök",
}

STANDALONE_PRICE_RE = re.compile(r"^\d[\d\s]*kr$")
LABELLED_PRICE_RE = re.compile(
    r"(?:Pris|price)[^>]*>[\s]*(\d[\d\s]+kr)(?:<|[\s]*$)", re.IGNORECASE | re.MULTILINE
)
VIEWING_RE = re.compile(r"\S+\s+\d+\s+\S+\s+kl\s+[\d:]+\s*-\s*[\d:]+")
VIEWING_BUTTON_RE = re.compile(r"\S+\s+\d+\s+\S+\s+kl\s+[\d:]+\s*-?\s*[\d:]*")
IMAGE_COUNT_RE = re.compile(r"^(\d+)\s*bilder$")
IMAGE_LABEL_RE = re.compile("bilder")
WATER_DISTANCE_RE = re.compile("km till vatten")
DOWN_PAYMENT_RE = re.compile(r"kontantinsats[^>]*>([^<]*\d+[^<]*kr)", re.IGNORECASE)
PRICE_TREND_RE = re.compile(r"Prisutveckling[^%]*?([+-]?\d+[,.]?\d*\s*%)")
AVG_PRICE_AFTER_LABEL_RE = re.compile(r"snitt[^>]*>([^<]*\d[\d\s]*kr/m)", re.IGNORECASE)
AVG_PRICE_BEFORE_LABEL_RE = re.compile(r"(\d[\d\s]*kr/m²)[^>]*snitt", re.IGNORECASE)
COORDINATES_RE = re.compile(r"ll=([\d.-]+),([\d.-]+)")

MAP_LINK_TEXT = "Visa på karta"
AGENT_LINK_SELECTOR = 'a[href*="/maklare/"][href*="/salda"] h2'
AGENCY_LINK_SELECTOR = 'a[href*="/maklare/"]:not([href*="/salda"])'
AGENCY_PARAGRAPH_SELECTOR = 'p:-soup-contains("Mäklarbyrå"), p:-soup-contains("Fastighetsbyrå")'
GALLERY_IMAGE_SELECTOR = 'img[src*="bilder.hemnet.se"], img[src*="images.hemnet.se"]'
LAZY_IMAGE_SELECTOR = 'img[data-src*="hemnet"]'


@dataclass(slots=True)
class DetailPage:
    """Parsed document plus the raw markup for regex-only fields."""

    soup: BeautifulSoup
    html: str


def definition_by_term(soup: BeautifulSoup, term: str) -> str:
    """Value of the first ``dt`` whose text contains ``term``.

    The value is the ``dd`` right after that ``dt``; an empty string when the
    label is missing or not followed by a ``dd``.
    """
    for label in soup.find_all("dt"):
        if term in label.get_text():
            value = label.find_next_sibling()
            if value is not None and value.name == "dd":
                return text_of(value)
            return ""
    return ""


def _location(page: DetailPage) -> str:
    link = page.soup.select_one(f'a:-soup-contains("{MAP_LINK_TEXT}")')
    if link is None or link.parent is None:
        return ""
    return link.parent.get_text().replace(MAP_LINK_TEXT, "").strip()


def _price_from_text_node(page: DetailPage) -> str:
    for text in text_nodes(page.soup):
        candidate = text.strip()
        if STANDALONE_PRICE_RE.match(candidate) and "/" not in candidate:
            return candidate
    return ""


def _price_from_markup(page: DetailPage) -> str:
    return search_group(LABELLED_PRICE_RE, page.html, 1)


PRICE_STRATEGIES = (_price_from_text_node, _price_from_markup)


def _description(page: DetailPage) -> str:
    for paragraph in page.soup.find_all("p"):
        text = text_of(paragraph)
        if len(text) > DESCRIPTION_MIN_LENGTH:
            return text
    return ""


def _viewings_after_heading(page: DetailPage) -> List[str]:
    heading = page.soup.select_one('h2:-soup-contains("Visningstider")')
    if heading is None:
        return []
    section = heading.find_next_sibling()
    return VIEWING_RE.findall(section.get_text()) if section is not None else []


def _viewings_from_buttons(page: DetailPage) -> List[str]:
    times: List[str] = []
    for button in page.soup.select('button:-soup-contains("kl")'):
        match = VIEWING_BUTTON_RE.search(text_of(button))
        if match:
            times.append(match.group(0).strip())
    return times


VIEWING_STRATEGIES = (_viewings_after_heading, _viewings_from_buttons)


def _agency_from_profile_link(page: DetailPage) -> str:
    link = page.soup.select_one(AGENCY_LINK_SELECTOR)
    return first_text(link, "p") if link is not None else ""


def _agency_from_paragraph(page: DetailPage) -> str:
    return first_text(page.soup, AGENCY_PARAGRAPH_SELECTOR)


AGENCY_STRATEGIES = (_agency_from_profile_link, _agency_from_paragraph)


def _broker_url(page: DetailPage) -> str:
    link = page.soup.select_one(AGENCY_LINK_SELECTOR)
    href = link.get("href") if link is not None else None
    return absolute_url(href) if href else ""


def _gallery_images(page: DetailPage) -> List[str]:
    return unique(
        (image.get("src") for image in page.soup.select(GALLERY_IMAGE_SELECTOR)),
        MAX_IMAGES,
    )


def _lazy_images(page: DetailPage) -> List[str]:
    return unique(
        (image.get("data-src") for image in page.soup.select(LAZY_IMAGE_SELECTOR)),
        MAX_IMAGES,
    )


IMAGE_STRATEGIES = (_gallery_images, _lazy_images)


def _image_count(page: DetailPage) -> int:
    # Walk up from each "bilder" text node; the counter may be split over spans.
    for text in page.soup.find_all(string=visible_string(IMAGE_LABEL_RE)):
        element = text.parent
        while element is not None and element.name != "[document]":
            match = IMAGE_COUNT_RE.match(text_of(element))
            if match:
                return int(match.group(1))
            if len(text_of(element)) > 40:
                break
            element = element.parent
    return 0


def _distance_to_water(page: DetailPage) -> str:
    text = page.soup.find(string=visible_string(WATER_DISTANCE_RE))
    return text_of(text.parent) if text is not None else ""


def _area_avg_after_label(page: DetailPage) -> str:
    return search_group(AVG_PRICE_AFTER_LABEL_RE, page.html, 1)


def _area_avg_before_label(page: DetailPage) -> str:
    return search_group(AVG_PRICE_BEFORE_LABEL_RE, page.html, 1)


AREA_AVG_STRATEGIES = (_area_avg_after_label, _area_avg_before_label)


def _coordinates(page: DetailPage) -> Optional[Coordinates]:
    link = page.soup.select_one('a[href*="maps.google.com"]')
    match = COORDINATES_RE.search(link.get("href") or "") if link is not None else None
    if not match:
        return None
    return Coordinates(lat=float(match.group(1)), lng=float(match.group(2)))


def extract_detail(html: Optional[str]) -> ListingDetail:
    """Build a ListingDetail; fields missing from the page stay empty."""
    page = DetailPage(soup=parse_html(html), html=html or "")
    soup = page.soup
    facts = {field: definition_by_term(soup, term) for field, term in TERMS.items()}
    images = cascade(page, IMAGE_STRATEGIES, [])

    return ListingDetail(
        title=first_text(soup, "h1"),
        location=cascade(page, (_location,), ""),
        price=cascade(page, PRICE_STRATEGIES, ""),
        description=_description(page),
        viewing_times=cascade(page, VIEWING_STRATEGIES, []),
        agent_name=first_text(soup, AGENT_LINK_SELECTOR),
        agent_agency=cascade(page, AGENCY_STRATEGIES, ""),
        broker_url=cascade(page, (_broker_url,), ""),
        image_count=cascade(page, (_image_count,), 0),
        image_urls=images,
        distance_to_water=_distance_to_water(page),
        down_payment=search_group(DOWN_PAYMENT_RE, html or "", 1),
        area_price_trend=search_group(PRICE_TREND_RE, html or "", 1),
        area_avg_price_per_sqm=cascade(page, AREA_AVG_STRATEGIES, ""),
        has_floor_plan=soup.select_one('button:-soup-contains("Planritning")') is not None,
        has_bankid_bidding="budgivning med bankid" in page.html.lower(),
        coordinates=cascade(page, (_coordinates,), None),
        **facts,
    )
