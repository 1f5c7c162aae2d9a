"""Command-line entry point."""

import argparse
import asyncio
import logging
import sys
from urllib.parse import parse_qsl

from limer_properties.cms.client import SanityClient
from limer_properties.cms.repository import ContentRepository, load_properties
from limer_properties.config import Settings
from limer_properties.filters.criteria import CriteriaFilter
from limer_properties.filters.query import QueryHydrator, to_query_string
from limer_properties.filters.state import FilterState
from limer_properties.logging import configure_logging, get_logger
from limer_properties.utils.formatting import format_price, truncate_text

logger = get_logger(__name__)


async def list_properties(settings: Settings, query: str = "") -> int:
    """Fetch listings, apply criteria from a query string, and print them.

    Returns the process exit code.
    """
    async with SanityClient.from_settings(settings) as client:
        state = await load_properties(ContentRepository(client))

    filter_state = FilterState(state.data)
    QueryHydrator(filter_state).hydrate(_query_params(query))
    matching = CriteriaFilter(filter_state.criteria).filter_properties(filter_state.records)

    if state.failed:
        print("Could not load properties from the content store.")
        return 1
    if not matching:
        print("No properties found.")
        return 0

    query_string = to_query_string(filter_state.criteria)
    print(f"{len(matching)} of {len(state.data)} properties ({query_string})")
    for prop in matching:
        print(
            f"  {format_price(prop.price):>16}  {truncate_text(prop.title, 50):<53}"
            f"  {prop.location_text}"
        )
    return 0


def _query_params(query: str) -> dict[str, str]:
    return dict(parse_qsl(query.lstrip("?")))


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Limer Properties - listings and inquiry service")
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the web API",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print properties matching --query",
    )
    parser.add_argument(
        "--query",
        default="",
        help="Filter query string, e.g. 'purpose=rent&bedrooms=3&maxPrice=5000000'",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON logs (production)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    args = parser.parse_args()

    configure_logging(
        json_output=args.json_logs, level=logging.DEBUG if args.debug else logging.INFO
    )

    try:
        settings = Settings()
    except Exception as e:
        logger.error("failed_to_load_settings", error=str(e))
        print(f"Error: Failed to load settings. {e}")
        print("Required for listings: LIMER_SANITY_PROJECT_ID")
        print("Required for email: LIMER_RESEND_API_KEY")
        sys.exit(1)

    if args.serve:
        import uvicorn

        from limer_properties.web.app import create_app

        app = create_app(settings, json_logs=args.json_logs)
        uvicorn.run(app, host=settings.web_host, port=settings.web_port, log_level="info")
    elif args.list:
        sys.exit(asyncio.run(list_properties(settings, args.query)))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
