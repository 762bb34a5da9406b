"""FastAPI application."""

import argparse
import logging
from typing import Optional

from fastapi import FastAPI

from hemnet_search import __version__
from hemnet_search.configs import Settings
from hemnet_search.controllers.tools_controllers import tools_router
from hemnet_search.logger_config import get_logger
from hemnet_search.models.api_models import HealthResponse
from hemnet_search.services.listings.service import ListingSearchService
from hemnet_search.tools.listing_search import LISTING_TOOLS
from hemnet_search.tools.tool import ToolBox

logger = logging.getLogger("hemnet.app")

APP_NAME = "mcp-hemnet"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with a renderer configuration fixed at startup."""
    settings = settings or Settings()
    get_logger("hemnet", settings.LOG_LEVEL)

    if not settings.BROWSER_RENDER_URL:
        logger.warning(
            "BROWSER_RENDER_URL is not set; page fetches will fail until it is configured."
        )

    service = ListingSearchService.from_config(settings.renderer_config())

    app = FastAPI(
        title="Hemnet Search API",
        version=__version__,
        description="Structured search over Hemnet listings and sold prices",
    )
    app.state.toolbox = ToolBox(service, LISTING_TOOLS)
    app.include_router(tools_router)

    @app.get("/health", response_model=HealthResponse, response_description="Api healthcheck")
    def health() -> HealthResponse:
        """Report that the service is up."""
        return HealthResponse(status="ok", name=APP_NAME, version=__version__)

    return app


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--docker", action="store_true", help="Running with docker")
    parser.add_argument("--host", required=True, help="Application host.")
    parser.add_argument("--port", required=True, help="Application port.")
    args = parser.parse_args()
    if not args.docker:
        from dotenv import load_dotenv

        load_dotenv()

    logger.info("Starting FastAPI application...")
    uvicorn.run(create_app(), host=args.host, port=int(args.port))
