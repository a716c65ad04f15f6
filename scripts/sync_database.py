#!/usr/bin/env python3
"""
Bring the backend up to the published snapshot.

Run: python scripts/sync_database.py [--check-only] [--api-url URL] [--manifest-url URL]

Compares the remote manifest with the backend watermarks (dbVersion, dataHash)
and, unless --check-only is given, replaces the backend data with the
published snapshot.

Exit codes:
  0 - Up to date, or update applied
  1 - Update available (--check-only), or update failed
  2 - Check failed (manifest unreachable or invalid)
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

try:
    from app.config import settings
    from app.client import build_orchestrator
except ImportError as e:
    print(f"ERROR: Failed to import required modules: {e}")
    print("Make sure you're running from the project root and dependencies are installed.")
    sys.exit(2)


async def run(check_only: bool) -> int:
    orchestrator = build_orchestrator(settings)
    try:
        check = await orchestrator.check()

        print(f"Current version:   {check.current_version} (hash {check.current_data_hash})")
        print(f"Published version: {check.latest_version} (hash {check.latest_data_hash})")
        if check.released_date:
            print(f"Released:          {check.released_date}")
        print("")

        if check.update_error:
            print(f"ERROR: Update check failed: {check.update_error}")
            return 2

        if not check.is_update_available:
            print("✓ Database is up to date")
            return 0

        if check_only:
            print("Update available (run without --check-only to apply)")
            return 1

        print("Applying update...")
        result = await orchestrator.update()
        if not result.success:
            print(f"✗ Update failed: {result.error}")
            return 1

        print(f"✓ Database updated to {result.new_version} (hash {result.new_data_hash})")
        return 0
    finally:
        await orchestrator.service.api.aclose()


def main():
    """Sync script entry point"""
    parser = argparse.ArgumentParser(
        description="Check for and apply published database snapshots"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only report whether an update is available"
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help=f"Sync API base URL (default: {settings.api_base_url})"
    )
    parser.add_argument(
        "--manifest-url",
        default=None,
        help=f"Manifest URL (default: {settings.manifest_url})"
    )
    args = parser.parse_args()

    if args.api_url:
        settings.api_base_url = args.api_url
    if args.manifest_url:
        settings.manifest_url = args.manifest_url

    sys.exit(asyncio.run(run(args.check_only)))


if __name__ == "__main__":
    main()
