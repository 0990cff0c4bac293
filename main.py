"""
KLADR command line client - search Russian addresses via KLADR API.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from internal.config.manager import ConfigManager
from lib.kladr import ContentType, KladrClient, KladrError
from lib.logging_utils import initLogging
from lib.utils import jsonDumps

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)

CONTENT_TYPES = [item.value for item in ContentType]


def addCommonArguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", help="What to search for")
    parser.add_argument("--region-id", dest="regionId", help="Restrict search to region")
    parser.add_argument("--district-id", dest="districtId", help="Restrict search to district")
    parser.add_argument("--city-id", dest="cityId", help="Restrict search to settlement")
    parser.add_argument(
        "--with-parent",
        dest="withParent",
        action="store_true",
        default=None,
        help="Include parent objects into result",
    )
    parser.add_argument("--limit", type=int, default=10, help="Max number of results (default: 10)")
    parser.add_argument("--offset", type=int, default=0, help="Results offset (default: 0)")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="KLADR API command line client, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml, optional)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument("--token", help="API token, overrides configuration")
    parser.add_argument("--url", help="API endpoint URL, overrides configuration")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    stringParser = subparsers.add_parser("string", help="Search across all address fields")
    addCommonArguments(stringParser)
    stringParser.add_argument("--content-type", dest="contentType", choices=CONTENT_TYPES)

    fieldParser = subparsers.add_parser("field", help="Search in single address field")
    addCommonArguments(fieldParser)
    fieldParser.add_argument("--content-type", dest="contentType", choices=CONTENT_TYPES)
    fieldParser.add_argument("--street-id", dest="streetId", help="Restrict search to street")
    fieldParser.add_argument("--building-id", dest="buildingId", help="Restrict search to building")
    fieldParser.add_argument("--zip", help="Postal code, forces building search")
    fieldParser.add_argument(
        "--type-code",
        dest="typeCode",
        type=int,
        help="Settlement kinds bitmask: 1 - city, 2 - village, 4 - rural",
    )

    args = parser.parse_args(argv)
    if not args.print_config and args.command is None:
        parser.error("command is required")

    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    return args


def buildOptions(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect search options given on command line."""
    keys = ["withParent", "regionId", "districtId", "cityId", "contentType"]
    if args.command == "field":
        keys += ["streetId", "buildingId", "zip", "typeCode"]

    return {key: getattr(args, key) for key in keys if getattr(args, key, None) is not None}


def loadConfig(args: argparse.Namespace) -> Optional[ConfigManager]:
    if not os.path.exists(args.config) and not args.config_dir:
        logger.debug(f"No config file {args.config}, using command line arguments only")
        return None
    return ConfigManager(configPath=args.config, configDirs=args.config_dir)


def createClient(args: argparse.Namespace, configManager: Optional[ConfigManager]) -> KladrClient:
    token: Optional[str] = None
    config: Dict[str, Any] = {}
    if configManager is not None:
        token, config = configManager.getKladrClientArgs()

    if args.token:
        token = args.token
    if args.url:
        config["url"] = args.url

    return KladrClient(token, config)


async def runQuery(args: argparse.Namespace, client: KladrClient) -> Any:
    """Run search requested on command line."""
    options = buildOptions(args)
    async with client:
        if args.command == "field":
            return await client.queryField(args.query, options, limit=args.limit, offset=args.offset)
        return await client.queryString(args.query, options, limit=args.limit, offset=args.offset)


def prettyPrintConfig(configManager: Optional[ConfigManager]) -> None:
    """Pretty-print the loaded configuration."""
    config = configManager.config if configManager is not None else {}
    print(jsonDumps(config, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    configManager = loadConfig(args)

    if configManager is not None and configManager.getLoggingConfig():
        initLogging(configManager.getLoggingConfig())

    if args.print_config:
        prettyPrintConfig(configManager)
        return 0

    try:
        client = createClient(args, configManager)
        result = asyncio.run(runQuery(args, client))
    except KladrError as e:
        logger.error(f"KLADR request failed: {e}")
        return 1

    print(jsonDumps(result, indent=2, sort_keys=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
