"""Command-line entry point: serve the API or run a one-off search."""

import argparse
import asyncio
import logging
import sys

from price_paid.backends import open_backends
from price_paid.config import Settings
from price_paid.errors import BackendError
from price_paid.logging import configure_logging, get_logger
from price_paid.models import PropertySearchRequest, PropertySearchResponse

logger = get_logger(__name__)


async def run_postcode_search(
    settings: Settings, request: PropertySearchRequest
) -> PropertySearchResponse:
    """Open the backends, run one postcode search and close them again."""
    async with open_backends(settings) as service:
        return await service.find_properties(request)


async def run_town_search(settings: Settings, town: str, page: int) -> PropertySearchResponse:
    """Open the backends, run one town search and close them again."""
    async with open_backends(settings) as service:
        return await service.find_properties_in_town(town, page)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Price Paid Finder - search property sales near a postcode"
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--serve",
        action="store_true",
        help="Start the JSON API web server",
    )
    mode.add_argument(
        "--postcode",
        help="Print sales within --distance km of this postcode (e.g. 'SW1A 1AA')",
    )
    mode.add_argument(
        "--town",
        help="Print sales in this town/city",
    )
    parser.add_argument(
        "--distance",
        type=int,
        default=None,
        help="Search radius in kilometres (default from settings)",
    )
    parser.add_argument(
        "--page",
        type=int,
        default=0,
        help="Zero-based results page",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(json_output=False, level=logging.DEBUG if args.debug else logging.INFO)

    try:
        settings = Settings()
    except Exception as e:
        logger.error("failed_to_load_settings", error=str(e))
        print(f"Error: Failed to load settings. {e}")
        print("Make sure you have a .env file with PRICE_PAID_* settings.")
        sys.exit(1)

    missing = settings.check_backends()
    if missing:
        logger.error("missing_backend_settings", missing=missing)
        print("Error: missing settings: " + ", ".join(f"PRICE_PAID_{m.upper()}" for m in missing))
        sys.exit(1)

    if args.page < 0 or (args.distance is not None and args.distance < 0):
        print("Error: --page and --distance must be >= 0")
        sys.exit(2)

    if args.serve:
        import uvicorn

        from price_paid.web.app import create_app

        app = create_app(settings)
        uvicorn.run(app, host=settings.web_host, port=settings.web_port, log_level="info")
        return

    try:
        if args.town is not None:
            response = asyncio.run(run_town_search(settings, args.town, args.page))
        else:
            distance = settings.default_distance_km if args.distance is None else args.distance
            request = PropertySearchRequest(
                postcode=args.postcode, distance_km=distance, page=args.page
            )
            response = asyncio.run(run_postcode_search(settings, request))
    except BackendError as e:
        logger.error("search_failed", error=str(e))
        print(f"Error: {e}")
        sys.exit(1)

    print(response.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
