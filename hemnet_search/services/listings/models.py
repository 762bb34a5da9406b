"""Domain models for Hemnet listing searches.

String fields on the result records are mandatory and default to an empty
string when a value could not be extracted. Consumers can format them without
``None`` checks; an empty string means "not found on the page", never a
coercion failure.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class LocationRef:
    """Hemnet location identifier resolved from a place name."""

    id: str
    name: str
    type: str


@dataclass(slots=True)
class SearchFilter:
    """Optional constraints for a listing search. Empty means nationwide."""

    min_rooms: Optional[float] = None
    max_rooms: Optional[float] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    max_fee: Optional[int] = None
    property_types: List[str] = field(default_factory=list)
    new_construction: Optional[str] = None
    keywords: Optional[str] = None
    open_house: Optional[str] = None
    has_balcony: bool = False
    has_elevator: bool = False
    days_listed: Optional[int] = None
    sort_order: Optional[str] = None


@dataclass(slots=True)
class ListingSummary:
    """Single row of an active-listings search page."""

    title: str = ""
    url: str = ""
    price: str = ""
    rooms: str = ""
    area: str = ""
    monthly_fee: str = ""
    description: str = ""
    location: str = ""
    image_url: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SoldListingSummary:
    """Single row of a sold-listings (slutpriser) search page."""

    address: str = ""
    location: str = ""
    sold_price: str = ""
    price_change_percent: str = ""
    sale_date: str = ""
    rooms: str = ""
    area: str = ""
    price_per_sqm: str = ""
    monthly_fee: str = ""
    property_type: str = ""
    agency: str = ""
    url: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(slots=True)
class ListingDetail:
    """Everything that could be read from a single listing page."""

    title: str = ""
    location: str = ""
    price: str = ""
    price_per_sqm: str = ""
    property_type: str = ""
    tenure_type: str = ""
    rooms: str = ""
    area: str = ""
    balcony: str = ""
    patio: str = ""
    floor: str = ""
    build_year: str = ""
    energy_class: str = ""
    monthly_fee: str = ""
    running_costs: str = ""
    description: str = ""
    viewing_times: List[str] = field(default_factory=list)
    agent_name: str = ""
    agent_agency: str = ""
    broker_url: str = ""
    image_count: int = 0
    image_urls: List[str] = field(default_factory=list)
    visit_count: str = ""
    distance_to_water: str = ""
    down_payment: str = ""
    area_price_trend: str = ""
    area_avg_price_per_sqm: str = ""
    has_floor_plan: bool = False
    has_bankid_bidding: bool = False
    coordinates: Optional[Coordinates] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class RenderedPage:
    """Markup returned for a URL, held only for one extraction pass."""

    url: str
    html: str


@dataclass(slots=True)
class SearchResult:
    """Aggregated result of an active-listings search."""

    location_name: str
    listings: List[ListingSummary] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location_name,
            "count": len(self.listings),
            "listings": [listing.as_dict() for listing in self.listings],
        }


@dataclass(slots=True)
class SoldSearchResult:
    """Aggregated result of a sold-listings search."""

    location_name: str
    listings: List[SoldListingSummary] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location_name,
            "count": len(self.listings),
            "listings": [listing.as_dict() for listing in self.listings],
        }


class HemnetError(RuntimeError):
    """Base class for failures that abort a search operation."""

    category = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(HemnetError):
    """Raised when the rendering backend has not been configured."""

    category = "configuration"


class BlockedError(HemnetError):
    """Raised when Hemnet answers with a bot verification challenge."""

    category = "blocked"


class NotFoundError(HemnetError):
    category = "not_found"


class LocationNotFoundError(NotFoundError):
    """Raised when a place name cannot be mapped to a location id."""

    def __init__(self, location: str) -> None:
        super().__init__(
            f'Could not find location "{location}". Try a Swedish municipality '
            'name like "Stockholm", "Göteborg", or "Upplands Väsby".'
        )
        self.location = location


class ListingRemovedError(NotFoundError):
    """Raised when a listing page reports that the listing is gone."""

    def __init__(self, url: str) -> None:
        super().__init__("This listing has been removed from Hemnet.")
        self.url = url


class TransportError(HemnetError):
    """Raised when an HTTP call to Hemnet or the renderer fails."""

    category = "transport"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidListingUrlError(HemnetError):
    category = "invalid_input"
