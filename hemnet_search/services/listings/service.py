"""High-level service that runs Hemnet searches end to end."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .extractors.detail import extract_detail
from .extractors.sold import extract_sold_summaries
from .extractors.summaries import extract_summaries
from .fetcher import PageFetcher, RendererConfig
from .locations import LocationResolver, common_locations
from .models import (
    InvalidListingUrlError,
    ListingDetail,
    LocationNotFoundError,
    SearchFilter,
    SearchResult,
    SoldSearchResult,
)
from .query_builder import build_search_url, build_sold_search_url

logger = logging.getLogger("hemnet.service")

NATIONWIDE = "Sverige"
LISTING_URL_MARKER = "hemnet.se/bostad/"


class ListingSearchService:
    """Resolve the location, build the URL, fetch and extract."""

    def __init__(
        self,
        fetcher: PageFetcher,
        resolver: Optional[LocationResolver] = None,
    ) -> None:
        self.fetcher = fetcher
        self.resolver = resolver or LocationResolver(fetcher)

    @classmethod
    def from_config(cls, config: RendererConfig) -> "ListingSearchService":
        return cls(PageFetcher(config))

    def _resolve(self, location: Optional[str]) -> Tuple[Optional[str], str]:
        """Return (location id, display name); no location means nationwide."""
        if not location or not location.strip():
            return None, NATIONWIDE
        resolved = self.resolver.resolve(location)
        if resolved is None:
            raise LocationNotFoundError(location)
        logger.info(
            "Resolved '%s' to %s (%s, %s)", location, resolved.id, resolved.name, resolved.type
        )
        return resolved.id, resolved.name

    def search(
        self, location: Optional[str], filters: Optional[SearchFilter] = None
    ) -> SearchResult:
        """Search active listings."""
        location_id, location_name = self._resolve(location)
        url = build_search_url(filters or SearchFilter(), location_id)
        html = self.fetcher.fetch_page(url)
        listings = extract_summaries(html, location_name)
        if not listings:
            logger.info("No listings found on %s", url)
        return SearchResult(location_name=location_name, listings=listings)

    def search_sold(
        self, location: Optional[str], filters: Optional[SearchFilter] = None
    ) -> SoldSearchResult:
        """Search sold listings (final prices)."""
        location_id, location_name = self._resolve(location)
        url = build_sold_search_url(filters or SearchFilter(), location_id)
        html = self.fetcher.fetch_page(url)
        listings = extract_sold_summaries(html, location_name)
        if not listings:
            logger.info("No sold listings found on %s", url)
        return SoldSearchResult(location_name=location_name, listings=listings)

    def get_listing(self, url: str) -> ListingDetail:
        """Fetch and extract a single listing page."""
        if LISTING_URL_MARKER not in url:
            raise InvalidListingUrlError(
                "Invalid Hemnet listing URL. URL must contain 'hemnet.se/bostad/'"
            )
        html = self.fetcher.fetch_page(url, expect_listing=True)
        return extract_detail(html)

    def list_locations(self) -> List[Dict[str, str]]:
        return common_locations()
