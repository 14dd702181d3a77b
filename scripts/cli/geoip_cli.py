#!/usr/bin/env python3
"""
Command-line interface for the GeoIP redirect service.

Usage:
    python geoip_cli.py detect -H "x-vercel-ip-country: us" [-H ...]
    python geoip_cli.py check-url <url> [--production]
    python geoip_cli.py check-config [source] [--production]
"""

import argparse
import asyncio
import json
import sys
import os
from typing import List, Optional, Tuple

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from geo_redirect.country import CountryResolver
from geo_redirect.redirect_config import load_redirect_config
from geo_redirect.common.runtime import Environment
from geo_redirect.common.validators import UrlSafetyValidator
from geo_redirect.common.logging_config import setup_logging


def parse_header(raw: str) -> Tuple[str, str]:
    """Parse a 'Name: value' argument."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header '{raw}', expected 'Name: value'")
    return name.strip(), value.strip()


class GeoIPCLI:
    """Command-line interface for country detection and URL screening."""

    def __init__(self, production: bool = False, verbose: bool = False):
        """Initialize CLI."""
        self.environment = Environment.PRODUCTION if production else Environment.NON_PRODUCTION
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.validator = UrlSafetyValidator(self.environment)

    def detect(self, headers: List[Tuple[str, str]]) -> int:
        """Resolve a country from the given headers."""
        match = CountryResolver(logger=self.logger).detect(headers)

        print(json.dumps({
            "success": match is not None,
            "country": match.country if match else "XX",
            "header": match.header if match else None,
            "source": match.source if match else None,
        }, indent=2))

        return 0 if match else 1

    def check_url(self, url: str) -> int:
        """Check whether a URL is a safe redirect target."""
        is_safe, error = self.validator.check(url)

        result = {
            "success": is_safe,
            "url": url,
            "environment": self.environment.value,
        }
        if not is_safe:
            result["error"] = error
        print(json.dumps(result, indent=2))

        return 0 if is_safe else 1

    async def check_config(self, source: Optional[str]) -> int:
        """Load a redirect config and screen every URL in it."""
        config = await load_redirect_config(source, logger=self.logger)

        unsafe = []
        for section, table in (("redirects", config.redirects), ("flags", config.flags)):
            for key, url in table.items():
                is_safe, error = self.validator.check(url)
                if not is_safe:
                    unsafe.append({"section": section, "key": key, "url": url, "error": error})

        print(json.dumps({
            "success": not unsafe,
            "redirects": len(config.redirects),
            "flags": len(config.flags),
            "unsafe": unsafe,
        }, indent=2))

        return 0 if not unsafe else 1


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="GeoIP Redirect CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Detect a country from headers
  %(prog)s detect -H "x-vercel-ip-country: us"

  # Check a redirect target as production would
  %(prog)s check-url http://10.0.0.5 --production

  # Screen every URL of a redirect config
  %(prog)s check-config ./config.json
        """
    )

    parser.add_argument(
        "--production",
        action="store_true",
        help="Apply production rules (block private hosts)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    # Also accepted after the subcommand, e.g. "check-url URL --production"
    production_parent = argparse.ArgumentParser(add_help=False)
    production_parent.add_argument(
        "--production",
        dest="production_mode",
        action="store_true",
        help="Apply production rules (block private hosts)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    detect_parser = subparsers.add_parser("detect", help="Detect a country from headers")
    detect_parser.add_argument(
        "-H", "--header",
        dest="headers",
        action="append",
        type=parse_header,
        default=[],
        help="Header as 'Name: value' (repeatable)"
    )

    check_url_parser = subparsers.add_parser(
        "check-url", parents=[production_parent], help="Check a redirect target"
    )
    check_url_parser.add_argument("url", help="URL to check")

    check_config_parser = subparsers.add_parser(
        "check-config", parents=[production_parent], help="Screen a redirect config"
    )
    check_config_parser.add_argument(
        "source",
        nargs="?",
        default=os.getenv("REDIRECT_CONFIG_SOURCE", "config.json"),
        help="Path or URL (default: from REDIRECT_CONFIG_SOURCE env or config.json)"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    production = args.production or getattr(args, "production_mode", False)
    cli = GeoIPCLI(production=production, verbose=args.verbose)

    if args.command == "detect":
        return cli.detect(args.headers)
    elif args.command == "check-url":
        return cli.check_url(args.url)
    elif args.command == "check-config":
        return await cli.check_config(args.source)

    parser.print_help()
    return 1


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
