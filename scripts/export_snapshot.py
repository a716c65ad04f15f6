#!/usr/bin/env python3
"""
Export the backend data as a snapshot file.

Run: python scripts/export_snapshot.py [--output DIR] [--api-url URL]

Writes ayto-complete-export-<date>.json into the output directory and
records it at the head of index.json (five most recent exports).

Exit codes:
  0 - Export written
  1 - Export failed
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
    from app.client import ApiClient, SnapshotExporter
except ImportError as e:
    print(f"ERROR: Failed to import required modules: {e}")
    print("Make sure you're running from the project root and dependencies are installed.")
    sys.exit(1)


async def run(api_url: str, output: str) -> int:
    async with ApiClient(
        api_url,
        timeout=settings.http_timeout_seconds,
        deadline=settings.request_deadline_seconds,
    ) as api:
        exporter = SnapshotExporter(api, output, settings.export_version)
        result = await exporter.export()

    if not result.success:
        print(f"✗ Export failed: {result.error}")
        return 1

    print(f"✓ Snapshot written to {result.path}")
    return 0


def main():
    """Export script entry point"""
    parser = argparse.ArgumentParser(description="Export the backend data as a snapshot file")
    parser.add_argument(
        "--output",
        default=settings.export_directory,
        help=f"Output directory (default: {settings.export_directory})"
    )
    parser.add_argument(
        "--api-url",
        default=settings.api_base_url,
        help=f"Sync API base URL (default: {settings.api_base_url})"
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.api_url, args.output)))


if __name__ == "__main__":
    main()
