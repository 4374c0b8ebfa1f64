"""Command-line entry point for the community listings data layer.

Key features:
- Dependency Injection via `core.container.Container`
- Remote API first, local storage fallback (degraded answers are marked)
- Admin login persisted between runs

Examples:
    python main.py communities
    python main.py search "river" --min-price 400000 --sort price-asc
    python main.py login admin@example.com
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
from typing import Any, List, Optional

from app.config import SortKey, settings
from core.container import Container
from core.errors import DataLayerError
from services.data_service import DataResult
from utils.helpers import format_price


logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )

    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)


def ensure_directories() -> None:
    """Ensure required directories exist."""

    settings.local_store_path.parent.mkdir(parents=True, exist_ok=True)


def _print_source(result: DataResult) -> None:
    if result.is_degraded:
        print(f"[offline] remote API unavailable ({result.error}); showing local data")
        if result.auth_expired:
            print("[offline] session expired, please login again")


def _print_listings(listings: List[Any]) -> None:
    if not listings:
        print("No listings found.")
        return
    for listing in listings:
        print(
            f"{listing.id}  {listing.title}  {format_price(listing.price)}  "
            f"{listing.bedrooms}bd/{listing.bathrooms}ba  "
            f"{listing.type.value.lower()}  {listing.status.value.lower()}"
        )


async def cmd_communities(service, args) -> None:
    result = await service.get_communities()
    _print_source(result)
    if not result.data:
        print("No communities found.")
    for community in result.data:
        print(f"{community.id}  {community.name}  {community.location}  {community.price_range}")


async def cmd_community(service, args) -> None:
    result = await service.get_community(args.id)
    _print_source(result)
    if result.data is None:
        print(f"Community {args.id} not found.")
        return
    print(json.dumps(result.data.to_wire(), indent=2, ensure_ascii=False))


async def cmd_listings(service, args) -> None:
    if args.community:
        result = await service.get_listings_by_community(args.community)
    else:
        result = await service.get_listings()
    _print_source(result)
    _print_listings(result.data)


async def cmd_search(service, args) -> None:
    filters = {
        "min_price": args.min_price,
        "max_price": args.max_price,
        "bedrooms": args.bedrooms,
        "bathrooms": args.bathrooms,
        "type": args.type,
        "community_id": args.community,
        "status": args.status,
    }
    result = await service.search_listings(args.query, filters)
    _print_source(result)
    listings = result.data
    if args.sort:
        listings = service.sort_listings(listings, args.sort)
    _print_listings(listings)


async def cmd_login(service, args) -> None:
    password = getpass.getpass("Password: ")
    admin = await service.login(args.email, password)
    who = admin.email if admin else args.email
    print(f"Logged in as {who}")


async def cmd_logout(service, args) -> None:
    await service.logout()
    print("Logged out.")


async def cmd_whoami(service, args) -> None:
    if not service.is_authenticated():
        print("Not logged in.")
        return
    admin = await service.verify_authentication()
    print(f"{admin.email} ({admin.role.value})")


async def cmd_preload(service, args) -> None:
    loaded = await service.preload_all_communities()
    print(f"Cached {loaded} communities.")


async def cmd_seed(service, args) -> None:
    if await service.initialize_example_data():
        print("Example data written to local storage.")
    else:
        print("Communities already exist; nothing seeded.")


async def cmd_analytics(service, args) -> None:
    result = await service.get_analytics()
    _print_source(result)
    data = result.data
    print(f"Communities: {data['communities']}")
    print(f"Builders:    {data['builders']}")
    print(f"Home plans:  {data['homes']}")
    print(
        f"Listings:    {data['listings']['total']} "
        f"({data['listings']['available']} available, "
        f"avg {format_price(data['listings']['avg_price'])})"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""

    parser = argparse.ArgumentParser(
        description="Browse and manage communities and listings"
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print remote/fallback/cache counters after the command",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("communities", help="List communities")
    p.set_defaults(handler=cmd_communities)

    p = sub.add_parser("community", help="Show one community")
    p.add_argument("id", help="Community ID")
    p.set_defaults(handler=cmd_community)

    p = sub.add_parser("listings", help="List listings")
    p.add_argument("--community", help="Only listings in this community")
    p.set_defaults(handler=cmd_listings)

    p = sub.add_parser("search", help="Search listings")
    p.add_argument("query", nargs="?", default="", help="Free-text query")
    p.add_argument("--min-price", type=float)
    p.add_argument("--max-price", type=float)
    p.add_argument("--bedrooms", type=float, help="Minimum bedrooms")
    p.add_argument("--bathrooms", type=float, help="Minimum bathrooms")
    p.add_argument("--type", help="house, townhome, condo or apartment")
    p.add_argument("--status", help="available, pending or sold")
    p.add_argument("--community", help="Community ID")
    p.add_argument(
        "--sort",
        choices=[key.value for key in SortKey],
        help="Sort order",
    )
    p.set_defaults(handler=cmd_search)

    p = sub.add_parser("login", help="Login as admin")
    p.add_argument("email")
    p.set_defaults(handler=cmd_login)

    p = sub.add_parser("logout", help="Forget the admin session")
    p.set_defaults(handler=cmd_logout)

    p = sub.add_parser("whoami", help="Verify and show the logged-in admin")
    p.set_defaults(handler=cmd_whoami)

    p = sub.add_parser("preload", help="Warm the community cache")
    p.set_defaults(handler=cmd_preload)

    p = sub.add_parser("seed", help="Write example data to local storage")
    p.set_defaults(handler=cmd_seed)

    p = sub.add_parser("analytics", help="Show dashboard counts")
    p.set_defaults(handler=cmd_analytics)

    return parser


async def run(args: argparse.Namespace) -> int:
    """Run one sub-command inside a container."""

    async with Container() as container:
        service = container.get_data_service()
        try:
            await args.handler(service, args)
        except (DataLayerError, ValueError) as e:
            logger.error(f"{args.command} failed: {e}")
            print(f"Error: {e}")
            return 1

        if args.stats:
            print(service.metrics.format_stats())
        logger.debug(f"Data layer stats: {service.get_stats()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the requested command."""

    setup_logging()
    ensure_directories()

    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
