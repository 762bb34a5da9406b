"""Translate a SearchFilter into Hemnet search URLs."""

from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urlencode

from .models import SearchFilter
from .utils import HEMNET_BASE_URL, format_number

SEARCH_URL = f"{HEMNET_BASE_URL}/bostader"
SOLD_SEARCH_URL = f"{HEMNET_BASE_URL}/salda/bostader"

PROPERTY_TYPES = {
    "villa": "villa",
    "house": "villa",
    "apartment": "bostadsratt",
    "lägenhet": "bostadsratt",
    "bostadsrätt": "bostadsratt",
    "townhouse": "radhus",
    "radhus": "radhus",
    "holiday": "fritidsboende",
    "fritidshus": "fritidsboende",
    "plot": "tomt",
    "tomt": "tomt",
    "farm": "gard",
    "gård": "gard",
}

SORT_ORDERS = {
    "newest": "newest",
    "oldest": "oldest",
    "cheapest": "price_asc",
    "expensive": "price_desc",
    "largest": "size_desc",
    "smallest": "size_asc",
    "lowest_fee": "fee_asc",
    "highest_fee": "fee_desc",
}

NEW_CONSTRUCTION = {"show": "1", "only": "2", "hide": "0"}

PUBLISHED_WITHIN = {1: "1d", 3: "3d", 7: "1w", 14: "2w", 30: "1m"}

Params = List[Tuple[str, str]]


def _map_property_type(value: str) -> str:
    # Unknown types are forwarded unchanged.
    return PROPERTY_TYPES.get(value.lower(), value)


def _map_sort_order(value: str) -> str:
    return SORT_ORDERS.get(value.lower(), value)


def _append_number(params: Params, name: str, value: Optional[float]) -> None:
    if value is not None:
        params.append((name, format_number(value)))


def _common_params(filters: SearchFilter, location_id: Optional[str]) -> Params:
    params: Params = []
    if location_id:
        params.append(("location_ids[]", location_id))
    _append_number(params, "rooms_min", filters.min_rooms)
    _append_number(params, "rooms_max", filters.max_rooms)
    _append_number(params, "price_min", filters.min_price)
    _append_number(params, "price_max", filters.max_price)
    _append_number(params, "living_area_min", filters.min_area)
    _append_number(params, "living_area_max", filters.max_area)
    return params


def _append_property_types(params: Params, filters: SearchFilter) -> None:
    for property_type in filters.property_types or []:
        params.append(("item_types[]", _map_property_type(property_type)))


def _append_sort_order(params: Params, filters: SearchFilter) -> None:
    if filters.sort_order:
        params.append(("order", _map_sort_order(filters.sort_order)))


def build_search_url(filters: SearchFilter, location_id: Optional[str] = None) -> str:
    """Return the active-listings search URL for the given filter."""
    params = _common_params(filters, location_id)
    _append_number(params, "fee_max", filters.max_fee)
    _append_property_types(params, filters)

    if filters.new_construction:
        params.append(
            (
                "new_construction",
                NEW_CONSTRUCTION.get(filters.new_construction, filters.new_construction),
            )
        )
    if filters.keywords:
        params.append(("keywords", filters.keywords))
    if filters.open_house:
        params.append(("upcoming_open_house", filters.open_house))
    if filters.has_balcony:
        params.append(("balcony", "1"))
    if filters.has_elevator:
        params.append(("elevator", "1"))
    if filters.days_listed is not None:
        params.append(
            (
                "published",
                PUBLISHED_WITHIN.get(filters.days_listed, format_number(filters.days_listed)),
            )
        )

    _append_sort_order(params, filters)
    return f"{SEARCH_URL}?{urlencode(params)}"


def build_sold_search_url(
    filters: SearchFilter, location_id: Optional[str] = None
) -> str:
    """Return the sold-listings URL; filters without a historical meaning are dropped."""
    params = _common_params(filters, location_id)
    _append_property_types(params, filters)
    _append_sort_order(params, filters)
    return f"{SOLD_SEARCH_URL}?{urlencode(params)}"
