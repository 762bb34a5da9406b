"""Tools exposing Hemnet searches with declared input schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from hemnet_search.services.listings.models import SearchFilter
from hemnet_search.tools.tool import ToolContext, tool

PropertyType = Literal["villa", "apartment", "townhouse", "holiday", "plot", "farm"]

LOCATION_DESCRIPTION = (
    "Swedish location/municipality to search (e.g., 'Stockholm', 'Göteborg'). "
    "Omit for nationwide search."
)


class SoldSearchInput(BaseModel):
    """Arguments shared by active and sold searches."""

    location: Optional[str] = Field(None, description=LOCATION_DESCRIPTION)
    min_rooms: Optional[float] = Field(None, description="Minimum number of rooms")
    max_rooms: Optional[float] = Field(None, description="Maximum number of rooms")
    min_price: Optional[int] = Field(None, description="Minimum price in SEK")
    max_price: Optional[int] = Field(
        None, description="Maximum price in SEK (e.g., 3000000 for max 3 million SEK)"
    )
    min_area: Optional[float] = Field(None, description="Minimum living area in m²")
    max_area: Optional[float] = Field(None, description="Maximum living area in m²")
    property_types: Optional[List[PropertyType]] = Field(
        None, description="Property types to include"
    )
    sort_by: Optional[
        Literal["newest", "oldest", "cheapest", "expensive", "largest", "smallest"]
    ] = Field(None, description="Sort order for results")

    def to_filter(self) -> SearchFilter:
        return SearchFilter(
            min_rooms=self.min_rooms,
            max_rooms=self.max_rooms,
            min_price=self.min_price,
            max_price=self.max_price,
            min_area=self.min_area,
            max_area=self.max_area,
            property_types=list(self.property_types or []),
            sort_order=self.sort_by,
        )


class SearchListingsInput(SoldSearchInput):
    """Arguments for the active listings search tool."""

    max_fee: Optional[int] = Field(
        None, description="Maximum monthly fee in SEK (for apartments)"
    )
    new_construction: Optional[Literal["show", "only", "hide"]] = Field(
        None,
        description=(
            "Filter new construction: 'show' (include), 'only' (only new), "
            "'hide' (exclude)"
        ),
    )
    keywords: Optional[str] = Field(
        None,
        description=(
            "Keywords to search for, e.g. property subtypes (slott, torp, penthouse) "
            "or features (pool, öppen spis, sjötomt, havsutsikt, garage)"
        ),
    )
    open_house: Optional[Literal["today", "tomorrow", "weekend"]] = Field(
        None, description="Filter by upcoming open house viewings"
    )
    has_balcony: Optional[bool] = Field(None, description="Require balcony/patio/terrace")
    has_elevator: Optional[bool] = Field(None, description="Require elevator")
    days_listed: Optional[int] = Field(
        None, description="Max days listed on Hemnet (1, 3, 7, 14, or 30)"
    )
    sort_by: Optional[
        Literal[
            "newest",
            "oldest",
            "cheapest",
            "expensive",
            "largest",
            "smallest",
            "lowest_fee",
            "highest_fee",
        ]
    ] = Field(None, description="Sort order for results")

    def to_filter(self) -> SearchFilter:
        filters = super().to_filter()
        filters.max_fee = self.max_fee
        filters.new_construction = self.new_construction
        filters.keywords = self.keywords
        filters.open_house = self.open_house
        filters.has_balcony = bool(self.has_balcony)
        filters.has_elevator = bool(self.has_elevator)
        filters.days_listed = self.days_listed
        return filters


class ListingDetailInput(BaseModel):
    url: str = Field(
        ...,
        description=(
            "Full Hemnet listing URL "
            "(e.g., 'https://www.hemnet.se/bostad/lagenhet-2rum-...')"
        ),
    )


@tool(
    name="search_hemnet",
    description="Search for real estate listings on Hemnet.se (Swedish property site)",
    schema=SearchListingsInput,
)
def search_hemnet(args: Dict[str, Any], ctx: ToolContext) -> Dict[str, Any]:
    payload = SearchListingsInput(**args)
    result = ctx.service.search(payload.location, payload.to_filter())
    return result.as_dict()


@tool(
    name="search_sold_hemnet",
    description="Search for sold property prices (slutpriser) on Hemnet.se",
    schema=SoldSearchInput,
)
def search_sold_hemnet(args: Dict[str, Any], ctx: ToolContext) -> Dict[str, Any]:
    payload = SoldSearchInput(**args)
    result = ctx.service.search_sold(payload.location, payload.to_filter())
    return result.as_dict()


@tool(
    name="get_hemnet_listing",
    description="Get detailed information about a specific Hemnet listing",
    schema=ListingDetailInput,
)
def get_hemnet_listing(args: Dict[str, Any], ctx: ToolContext) -> Dict[str, Any]:
    payload = ListingDetailInput(**args)
    details = ctx.service.get_listing(payload.url)
    return {"url": payload.url, **details.as_dict()}


@tool(
    name="list_hemnet_locations",
    description="List commonly supported Swedish locations for Hemnet search",
)
def list_hemnet_locations(args: Dict[str, Any], ctx: ToolContext) -> Dict[str, Any]:
    return {
        "locations": ctx.service.list_locations(),
        "note": "You can also search for any Swedish municipality by name.",
    }


LISTING_TOOLS = (
    search_hemnet,
    search_sold_hemnet,
    get_hemnet_listing,
    list_hemnet_locations,
)
