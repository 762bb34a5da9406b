"""Retrieve Hemnet markup through the remote browser renderer."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from bs4 import BeautifulSoup

from .models import (
    BlockedError,
    ConfigurationError,
    ListingRemovedError,
    RenderedPage,
    TransportError,
)
from .utils import DEFAULT_HEADERS

logger = logging.getLogger("hemnet.fetcher")

BOT_CHALLENGE_MARKER = "Verify you are human"
REMOVED_LISTING_MARKERS = (
    "Sidan hittades inte",
    "Den här bostaden finns inte längre",
)


@dataclass(frozen=True, slots=True)
class RendererConfig:
    """Connection settings for the browser rendering service."""

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout_ms: int = 10000
    request_timeout: float = 30


class PageFetcher:
    """Fetch pages via the renderer and JSON endpoints directly when possible."""

    def __init__(self, config: RendererConfig) -> None:
        self.config = config

    def fetch_page(self, url: str, expect_listing: bool = False) -> str:
        """Return rendered markup for ``url`` after validating its content."""
        page = self.render(url)
        check_markup(page, expect_listing=expect_listing)
        return page.html

    def fetch_json(self, url: str) -> Any:
        """Return parsed JSON, trying a direct request before the renderer."""
        try:
            response = requests.get(
                url,
                headers={**DEFAULT_HEADERS, "Accept": "application/json"},
                timeout=self.config.request_timeout,
            )
            if response.ok:
                return response.json()
            logger.info(
                "Direct JSON fetch of %s returned HTTP %s, using renderer.",
                url,
                response.status_code,
            )
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.info("Direct JSON fetch of %s failed (%s), using renderer.", url, exc)

        page = self.render(url)
        payload = extract_pre_json(page.html)
        if payload is None:
            raise TransportError(f"Could not extract JSON from {url}")
        return payload

    def render(self, url: str) -> RenderedPage:
        """Ask the rendering backend for the fully rendered markup of ``url``."""
        if not self.config.base_url:
            raise ConfigurationError(
                "BROWSER_RENDER_URL not configured. Set it as an environment variable."
            )

        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        logger.info("Rendering %s", url)
        try:
            response = requests.post(
                self.config.base_url,
                headers=headers,
                json={"url": url, "timeout": self.config.timeout_ms},
                timeout=self.config.request_timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"Browser render timed out: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Browser render request failed: {exc}") from exc

        if not response.ok:
            raise TransportError(
                f"Browser render failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"Browser render returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise TransportError("Browser render returned an unexpected payload")
        if data.get("error"):
            raise TransportError(f"Browser render error: {data['error']}")
        html = data.get("html")
        if not html:
            raise TransportError("Browser render returned empty HTML")
        return RenderedPage(url=url, html=html)


def check_markup(page: RenderedPage, expect_listing: bool = False) -> None:
    """Raise when the markup is a bot challenge or a removed-listing page."""
    if BOT_CHALLENGE_MARKER in page.html:
        logger.warning("Bot verification challenge served for %s", page.url)
        raise BlockedError(
            "Hemnet is showing a bot verification challenge. Please try again later."
        )
    if expect_listing and any(marker in page.html for marker in REMOVED_LISTING_MARKERS):
        raise ListingRemovedError(page.url)


def extract_pre_json(html: str) -> Optional[Any]:
    """Parse the JSON a browser shows inside ``<pre>`` for a raw JSON response."""
    pre = BeautifulSoup(html, "html.parser").find("pre")
    if pre is None:
        return None
    try:
        return json.loads(pre.get_text().strip())
    except ValueError:
        return None
