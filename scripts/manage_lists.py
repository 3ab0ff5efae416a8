#!/usr/bin/env python3
"""Manage auto-generated catalog lists.

Creates tables and runs the generation operations from the command line.
Every command except create-tables makes paid generation calls.

Usage:
    python scripts/manage_lists.py create-tables
    python scripts/manage_lists.py initialize
    python scripts/manage_lists.py update --category Phone
    python scripts/manage_lists.py generate-models --category Laptop
    python scripts/manage_lists.py refresh-expired
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from repairbeam.application.list_service import get_list_service
from repairbeam.domain.exceptions import UnknownCategoryError
from repairbeam.domain.value_objects import Category
from repairbeam.infrastructure.config import settings
from repairbeam.infrastructure.database import create_tables
from repairbeam.infrastructure.logging_conf import configure_logging


async def run(args: argparse.Namespace) -> int:
    """Run the selected command.

    Args:
        args: Parsed command line arguments.

    Returns:
        Process exit code.
    """
    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    if args.command == "create-tables":
        return 0

    service = get_list_service()

    if args.command == "initialize":
        counts = await service.initialize_brand_lists()
        for category, count in counts.items():
            print(f"  ✓ {category}: {count} brands")
        return 0

    if args.command == "refresh-expired":
        report = await service.refresh_expired_lists()
        for list_kind in report.refreshed:
            print(f"  ✓ Refreshed: {list_kind}")
        for list_kind in report.failed:
            print(f"  ✗ Failed: {list_kind}")
        return 1 if report.failed else 0

    category: Category = args.category

    if args.command == "update":
        brand_list = await service.refresh_brand_list(category)
        print(f"  ✓ {category.value}: {len(brand_list.items)} brands")
        return 0

    # generate-models
    sweep = await service.refresh_all_model_lists(category)
    if sweep is None:
        print(f"  ✗ No brand list for {category.value}; run 'update' first")
        return 1

    print(f"  ✓ Active brands: {len(sweep.active_brands)}")
    print(f"  ✓ Excluded: {', '.join(sweep.excluded_brands) or '-'}")
    print(f"  ✓ Fallback: {', '.join(sweep.fallback_brands) or '-'}")
    for brand in sweep.failed_writes:
        print(f"  ✗ Write failed: {brand}")
    return 1 if sweep.failed_writes else 0


def category_arg(value: str) -> Category:
    """Parse a ``--category`` value, reporting unknown names as usage errors."""
    try:
        return Category.parse(value)
    except UnknownCategoryError as e:
        raise argparse.ArgumentTypeError(e.message) from e


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Manage auto-generated brand and model lists",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("create-tables", help="Create database tables only")
    subparsers.add_parser("initialize", help="Generate brand lists for every category")
    subparsers.add_parser("refresh-expired", help="Regenerate brand lists past their refresh time")

    for name, help_text in (
        ("update", "Force regeneration of one category's brand list"),
        ("generate-models", "Generate model lists for every brand of a category"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--category",
            required=True,
            type=category_arg,
            help=f"Device category ({', '.join(Category.values())})",
        )

    return parser


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()

    configure_logging(settings.log_level, json_output=False)

    print("=" * 60)
    print("Repair Beam List Manager")
    print("=" * 60)
    print(f"Command: {args.command}")
    print()

    exit_code = asyncio.run(run(args))

    print("=" * 60)
    print("Done." if exit_code == 0 else "Finished with errors.")
    print("=" * 60)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
