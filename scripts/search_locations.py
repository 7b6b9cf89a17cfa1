#!/usr/bin/env python3
"""CLI script to search locations or validate an address."""
import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nepal_geo import NepalGeoHelper
from nepal_geo.core.config import LOG_LEVEL, SEARCH_LIMIT
from nepal_geo.core.errors import DataIntegrityError
from nepal_geo.core.models import SearchScope, SortBy
from nepal_geo.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Search Nepal districts and post offices")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search by name or postal code")
    search_parser.add_argument("query", help="District, post office or postal code")
    search_parser.add_argument("--scope", default=SearchScope.ALL.value,
                               choices=[s.value for s in SearchScope])
    search_parser.add_argument("--sort-by", default=SortBy.RELEVANCE.value,
                               choices=[s.value for s in SortBy])
    search_parser.add_argument("--limit", type=int, default=SEARCH_LIMIT)
    search_parser.add_argument("--format", default="json", help="Output format (json or csv)")

    suggest_parser = subparsers.add_parser("suggest", help="Autocomplete a partial name")
    suggest_parser.add_argument("prefix")
    suggest_parser.add_argument("--limit", type=int, default=5)

    validate_parser = subparsers.add_parser("validate", help="Validate an address")
    validate_parser.add_argument("--district")
    validate_parser.add_argument("--municipality")
    validate_parser.add_argument("--ward", type=int)
    validate_parser.add_argument("--post-office")
    validate_parser.add_argument("--postal-code")

    subparsers.add_parser("stats", help="Dataset statistics")

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)

    try:
        geo = NepalGeoHelper()
    except DataIntegrityError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "search":
        results = geo.search_locations(args.query, limit=args.limit, scope=args.scope, sort_by=args.sort_by)
        exported = geo.search.export_results(results, args.format)
        if not exported.ok:
            print(f"Error: {exported.error}", file=sys.stderr)
            sys.exit(2)
        print(exported.content)

    elif args.command == "suggest":
        for name in geo.search.get_suggestions(args.prefix, limit=args.limit):
            print(name)

    elif args.command == "validate":
        address = {
            "district": args.district,
            "municipality": args.municipality,
            "ward": args.ward,
            "post_office": args.post_office,
            "postal_code": args.postal_code,
        }
        result = geo.validate_address({k: v for k, v in address.items() if v is not None})
        print(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.is_valid else 3)

    elif args.command == "stats":
        print(json.dumps(geo.get_statistics().to_dict(), indent=2))


if __name__ == "__main__":
    main()
