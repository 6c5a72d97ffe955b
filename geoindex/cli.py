"""
GeoIndex Command Line
=====================

Usage:
    # Create the index table of the current environment
    geoindex init

    # Index one location
    geoindex store --owner <uuid> --collection users --property location \\
        --entity <uuid> --type user --lat 37.7749 --lon -122.4194

    # Proximity search (radius in meters)
    geoindex search --owner <uuid> --collection users --property location \\
        --lat 37.7749 --lon -122.4194 --distance 500 --count 10

Options --env and --database-url select the environment and database; the
defaults come from GEOINDEX_ENV and GEOINDEX_DATABASE_URL.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional
from uuid import UUID

import structlog

from geoindex.config import get_current_environment, get_environment_config, Environment
from geoindex.config.settings import load_settings
from geoindex.core.errors import GeoIndexError
from geoindex.core.models import LocationRecord, Point, ResultLevel
from geoindex.manager import GeoIndexManager
from geoindex.storage.columns.config import SQLStoreConfig
from geoindex.storage.columns.sql import SQLColumnStore


def configure_logging(verbose: bool = False) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="geoindex", description="Geospatial location index")
    parser.add_argument("--env", choices=[e.value for e in Environment], help="Environment (default: GEOINDEX_ENV or test)")
    parser.add_argument("--database-url", help="SQLAlchemy async database URL")
    parser.add_argument("--config", help="Settings YAML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create the index table")

    def index_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--owner", type=UUID, required=True, help="Owner entity UUID")
        p.add_argument("--collection", required=True, help="Collection name")
        p.add_argument("--property", default="location", help="Location property name")
        p.add_argument("--lat", type=float, required=True, help="Latitude")
        p.add_argument("--lon", type=float, required=True, help="Longitude")

    store = sub.add_parser("store", help="Index one entity location")
    index_args(store)
    store.add_argument("--entity", type=UUID, required=True, help="Entity UUID")
    store.add_argument("--type", dest="entity_type", required=True, help="Entity type")

    search = sub.add_parser("search", help="Proximity search")
    index_args(search)
    search.add_argument("--distance", type=float, default=0.0, help="Radius in meters (0 = unlimited)")
    search.add_argument("--count", type=int, default=10, help="Maximum results")
    search.add_argument("--level", choices=[lv.value for lv in ResultLevel], default=ResultLevel.REFS.value)
    search.add_argument("--timeout", type=float, help="Search deadline in seconds")

    return parser


def _store_config(args: argparse.Namespace) -> SQLStoreConfig:
    env = get_environment_config(Environment(args.env)) if args.env else get_current_environment()
    config = SQLStoreConfig.from_environment(env)
    if args.database_url:
        config.url = args.database_url
    return config


async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    config = _store_config(args)
    settings = load_settings(args.config)

    if args.command == "init":
        store = SQLColumnStore(config)
        try:
            await store.ensure_table_exists()
        finally:
            await store.close()
        print(f"Index table ready: {config.table_name}")
        return 0

    manager = await GeoIndexManager.connect(config, settings)
    async with manager:
        try:
            if args.command == "store":
                record = LocationRecord(
                    entity_id=args.entity,
                    entity_type=args.entity_type,
                    latitude=args.lat,
                    longitude=args.lon,
                )
                cells = await manager.store_location(args.owner, args.collection, args.property, record)
                print(f"Stored {record.entity_id} in {len(cells)} cells: {', '.join(cells)}")
            else:
                results = await manager.proximity_search_collection(
                    args.owner,
                    args.collection,
                    args.property,
                    center=Point(args.lat, args.lon),
                    max_distance=args.distance,
                    count=args.count,
                    level=ResultLevel(args.level),
                    timeout=args.timeout,
                )
                for ref in results.refs:
                    print(f"{ref.type}\t{ref.uuid}")
        except GeoIndexError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


def run(argv: Optional[List[str]] = None) -> int:
    return asyncio.run(main(argv))


if __name__ == "__main__":
    sys.exit(run())
