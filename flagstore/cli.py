"""Flag store admin command.

Usage:
    flagstore [-v] [--database-url URL] init [--no-seed]
    flagstore [-v] [--database-url URL] types
    flagstore [-v] [--database-url URL] add-type NAME
    flagstore [-v] [--database-url URL] remove-type NAME
    flagstore [-v] [--database-url URL] count TARGET_KIND [--type NAME]

The database URL defaults to FLAGSTORE_DATABASE_URL.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from flagstore.bootstrap import init_db
from flagstore.core.logging import get_logger, setup_logging
from flagstore.db.session import create_engine, create_session_maker
from flagstore.store import FlagStore

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flagstore", description="Manage a flag store database")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: FLAGSTORE_DATABASE_URL)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug events to stderr"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    init = commands.add_parser("init", help="Create tables and seed default flag types")
    init.add_argument("--no-seed", action="store_true", help="Skip the default flag types")

    commands.add_parser("types", help="List flag types")

    add_type = commands.add_parser("add-type", help="Add a flag type")
    add_type.add_argument("name")

    remove_type = commands.add_parser("remove-type", help="Remove a flag type (flags are kept)")
    remove_type.add_argument("name")

    count = commands.add_parser("count", help="Count flags on a target kind")
    count.add_argument("target_kind")
    count.add_argument("--type", dest="flag_type", default=None, help="Only count this flag type")

    return parser


async def run(args: argparse.Namespace) -> int:
    """Execute a parsed command. Returns the exit status."""
    engine = create_engine(args.database_url)
    store = FlagStore(create_session_maker(engine))

    try:
        if args.command == "init":
            created = await init_db(engine, seed=not args.no_seed)
            print(f"Schema ready, {created} flag type(s) seeded")

        elif args.command == "types":
            for flag_type in await store.list_flag_types():
                print(f"{flag_type.id}\t{flag_type.name}")

        elif args.command == "add-type":
            flag_type = await store.add_flag_type(args.name)
            print(f"{flag_type.id}\t{flag_type.name}")

        elif args.command == "remove-type":
            if not await store.remove_flag_type(args.name):
                logger.info("flag_type_not_found", name=args.name)
                print(f"No flag type named '{args.name}'", file=sys.stderr)
                return 1
            print(f"Removed flag type '{args.name}'")

        elif args.command == "count":
            print(await store.get_flag_count(args.target_kind, args.flag_type))

    finally:
        await engine.dispose()

    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``flagstore`` console script."""
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)
    structlog.contextvars.bind_contextvars(command=args.command)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
