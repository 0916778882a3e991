#!/usr/bin/env python3
"""
Command-line interface for snaplink.

Works directly on the URL document, so stop the server (or accept that
its next save overwrites CLI changes) before mutating.

Usage:
    snaplink shorten <url> [--custom-slug SLUG] [--ttl MS] [--base-url URL]
    snaplink stats <short_id>
    snaplink list [--limit N]
    snaplink sweep
    snaplink health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional

from .common.logging_config import setup_logging
from .exceptions import ShortenerError
from .qr import QRCodeEncoder
from .registry import URLRegistry
from .service import URLShortenerService
from .store.json_store import JSONFileStore
from .sweeper import ExpirySweeper


class SnaplinkCLI:
    """Command-line interface for snaplink."""

    def __init__(self, data_dir: str, data_file: str = "urls.json", verbose: bool = False):
        self.data_dir = data_dir
        self.data_file = data_file
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Load the URL document."""
        registry = URLRegistry(qr_encoder=QRCodeEncoder(logger=self.logger), logger=self.logger)
        store = JSONFileStore(self.data_dir, self.data_file, logger=self.logger)
        self.service = URLShortenerService(store=store, registry=registry, logger=self.logger)
        await self.service.load()

    def _print(self, payload: dict, error: bool = False):
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)

    async def shorten(
        self,
        url: str,
        base_url: str,
        custom_slug: Optional[str] = None,
        ttl: Optional[int] = None,
    ) -> int:
        """Shorten a URL."""
        try:
            entry = await self.service.create_short_url(url, base_url, ttl=ttl, custom_slug=custom_slug)
        except ShortenerError as e:
            self._print({"success": False, "error": e.message}, error=True)
            return 1

        self._print({
            "success": True,
            "shortId": entry.short_id,
            "longUrl": entry.long_url,
            "createdAt": entry.created_at,
            "ttl": entry.ttl,
        })
        return 0

    async def stats(self, short_id: str) -> int:
        """Print statistics for a short id."""
        try:
            entry = self.service.get_stats(short_id)
        except ShortenerError as e:
            self._print({"success": False, "error": e.message}, error=True)
            return 1

        stats = entry.get_stats()
        stats.pop("qrCode", None)
        self._print({"success": True, **stats})
        return 0

    async def list_urls(self, limit: int = 100) -> int:
        """List recently created URLs."""
        entries = self.service.list_urls(limit)
        urls = []
        for entry in entries:
            stats = entry.get_stats()
            stats.pop("qrCode", None)
            urls.append(stats)

        self._print({"success": True, "count": len(urls), "urls": urls})
        return 0

    async def sweep(self) -> int:
        """Remove expired URLs now."""
        removed = await ExpirySweeper(self.service, logger=self.logger).run_once()
        self._print({"success": True, "removed": removed})
        return 0

    async def health(self) -> int:
        """Print table counts."""
        self._print({"success": True, **self.service.health_summary()})
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snaplink",
        description="snaplink URL shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom slug that expires in one day
  %(prog)s shorten https://example.com/long/url --custom-slug promo --ttl 86400000

  # Get statistics
  %(prog)s stats promo

  # Remove expired URLs
  %(prog)s sweep
        """
    )

    parser.add_argument(
        "--data-dir",
        default=os.getenv("DATA_DIR", "data"),
        help="Directory of the URL document (default: from DATA_DIR env or ./data)"
    )
    parser.add_argument(
        "--data-file",
        default=os.getenv("DATA_FILE", "urls.json"),
        help="URL document file name (default: from DATA_FILE env or urls.json)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-slug", help="Custom short id")
    shorten_parser.add_argument("--ttl", type=int, help="Time to live in milliseconds")
    shorten_parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:3001"),
        help="Base URL encoded into the QR code"
    )

    stats_parser = subparsers.add_parser("stats", help="Get URL statistics")
    stats_parser.add_argument("short_id", help="Short id to get stats for")

    list_parser = subparsers.add_parser("list", help="List recent URLs")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    subparsers.add_parser("sweep", help="Remove expired URLs")
    subparsers.add_parser("health", help="Show table counts")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = SnaplinkCLI(
        data_dir=args.data_dir,
        data_file=args.data_file,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()
    except ShortenerError as e:
        cli._print({"success": False, "error": e.message}, error=True)
        return 1

    if args.command == "shorten":
        return await cli.shorten(args.url, args.base_url, args.custom_slug, args.ttl)
    elif args.command == "stats":
        return await cli.stats(args.short_id)
    elif args.command == "list":
        return await cli.list_urls(args.limit)
    elif args.command == "sweep":
        return await cli.sweep()
    elif args.command == "health":
        return await cli.health()

    parser.print_help()
    return 1


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
