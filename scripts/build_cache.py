#!/usr/bin/env python3
"""CLI script to rebuild the JSON postal data cache from the CSV source."""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nepal_geo.core.config import DATA_PATH, CACHE_PATH, LOG_LEVEL, PROJECT_ROOT
from nepal_geo.core.errors import DataIntegrityError
from nepal_geo.core.store import load_store
from nepal_geo.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Build postal data cache")
    parser.add_argument("--csv-path", type=Path, default=DATA_PATH,
                       help="Postal data CSV path")
    parser.add_argument("--cache-path", type=Path,
                       default=CACHE_PATH or PROJECT_ROOT / "data" / "postal-data.json",
                       help="JSON cache output path")

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)

    # A stale cache would be loaded instead of the CSV
    if args.cache_path.exists():
        args.cache_path.unlink()

    print(f"Building postal data cache from {args.csv_path}...")
    try:
        store = load_store(args.csv_path, args.cache_path)
    except DataIntegrityError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    stats = store.get_statistics()
    print(f"✅ Cached {stats.total_post_offices} post offices in "
          f"{stats.total_districts} districts to {args.cache_path}")


if __name__ == "__main__":
    main()
