"""CLI entry point for TorLens.

Runs one query against the directory service and prints the result as
JSON on stdout. Every command maps onto one
[TorLens][torlens.client.TorLens] method.

Examples:
    ```bash
    python -m torlens search moria1
    python -m torlens relay 9695DFC35FFEB861329B9F1AB04C46397020CE31
    python -m torlens flags Guard Fast
    python -m torlens top --limit 5
    python -m torlens advanced type=relay flag=Exit limit=3
    python -m torlens --config config/torlens.yaml --log-level DEBUG port 443
    ```
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NamedTuple

from torlens.client import TorLens, TorLensConfig
from torlens.core.exceptions import TorLensError
from torlens.core.logger import Logger, StructuredFormatter


class CommandEntry(NamedTuple):
    """Registry entry mapping a CLI command to a client method and its argument."""

    method: str
    help: str
    arg: str | None = None
    arg_type: Callable[[str], Any] = str
    nargs: str | None = None


COMMAND_REGISTRY: dict[str, CommandEntry] = {
    "search": CommandEntry("search", "Full document for a search term", "term", nargs="?"),
    "relay": CommandEntry("get_relay_by_fingerprint", "Relay by fingerprint", "fingerprint"),
    "nickname": CommandEntry("get_relays_by_nickname", "Relays by nickname", "nickname"),
    "or-address": CommandEntry("get_relays_by_or_address", "Relays by OR address", "address"),
    "exit-address": CommandEntry(
        "get_relays_by_exit_address", "Relays by exit address", "address"
    ),
    "hostname": CommandEntry("get_relays_by_hostname", "Relays by host name", "hostname"),
    "verified-hostname": CommandEntry(
        "get_relays_by_verified_hostname", "Relays by verified host name", "hostname"
    ),
    "unverified-hostname": CommandEntry(
        "get_relays_by_unverified_hostname", "Relays by unverified host name", "hostname"
    ),
    "country": CommandEntry("get_relays_by_country", "Relays by country code", "country_code"),
    "as": CommandEntry("get_relays_by_as", "Relays by AS number", "as_number"),
    "as-name": CommandEntry("get_relays_by_as_name", "Relays by AS name", "as_name"),
    "flags": CommandEntry("get_relays_by_flags", "Relays carrying all flags", "flag", nargs="+"),
    "platform": CommandEntry("get_relays_by_platform", "Relays by platform", "platform"),
    "version": CommandEntry("get_relays_by_version", "Relays by Tor version", "version"),
    "version-status": CommandEntry(
        "get_relays_by_version_status", "Relays by version status", "status"
    ),
    "min-bandwidth": CommandEntry(
        "get_relays_by_min_bandwidth", "Relays with a minimum bandwidth rate", "bytes", int
    ),
    "contact": CommandEntry("get_relays_by_contact", "Relays by contact info", "contact"),
    "port": CommandEntry("get_relays_by_port", "Relays whose exit policy accepts a port", "port", int),
    "top": CommandEntry("get_top_relays_by_weight", "Top relays by consensus weight"),
    "min-runtime": CommandEntry(
        "get_relays_by_min_run_time", "Relays first seen at least N days ago", "days", float
    ),
    "bridges": CommandEntry("get_all_bridges", "All bridges"),
    "bridge": CommandEntry("get_bridge_by_fingerprint", "Bridge by fingerprint", "fingerprint"),
    "transport": CommandEntry(
        "get_bridges_by_transport", "Bridges by pluggable transport", "transport"
    ),
    "advanced": CommandEntry(
        "advanced_search", "Full document for key=value parameters", "param", nargs="*"
    ),
}

logger = Logger("torlens.cli")


def _key_value(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    return key, value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="torlens",
        description="Query Tor relay and bridge details from an Onionoo instance",
    )
    parser.add_argument(
        "--base-url",
        help="Directory service root (default: public Onionoo instance)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file with a base_url key",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, entry in COMMAND_REGISTRY.items():
        sub = subparsers.add_parser(name, help=entry.help)
        if name == "top":
            sub.add_argument("--limit", type=int, default=10, help="Number of relays (default: 10)")
        elif name == "advanced":
            sub.add_argument(entry.arg, type=_key_value, nargs=entry.nargs)
        elif entry.arg is not None:
            sub.add_argument(entry.arg, type=entry.arg_type, nargs=entry.nargs)

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install a ``StructuredFormatter`` on the root handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def build_client(args: argparse.Namespace) -> TorLens:
    """Build the client from ``--config`` and ``--base-url`` (the flag wins)."""
    if args.base_url:
        return TorLens(TorLensConfig(base_url=args.base_url))
    if args.config:
        return TorLens.from_yaml(args.config)
    return TorLens()


def _call_arguments(args: argparse.Namespace) -> tuple[Any, ...]:
    entry = COMMAND_REGISTRY[args.command]
    if args.command == "top":
        return (args.limit,)
    if args.command == "advanced":
        return (dict(getattr(args, entry.arg)),)
    if entry.arg is None:
        return ()
    return (getattr(args, entry.arg),)


def to_jsonable(result: Any) -> Any:
    """Convert a model, a list of models or ``None`` into plain JSON data."""
    if result is None:
        return None
    if isinstance(result, list):
        return [item.to_dict() for item in result]
    return result.to_dict()


async def run_command(client: TorLens, args: argparse.Namespace) -> Any:
    method = getattr(client, COMMAND_REGISTRY[args.command].method)
    return await method(*_call_arguments(args))


def main(argv: list[str] | None = None) -> int:
    """Run one command and print its JSON result.

    Returns:
        Exit code: 0 for success, 1 for failure.
    """
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        client = build_client(args)
        result = asyncio.run(run_command(client, args))
    except (TorLensError, OSError, ValueError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        return 1

    json.dump(to_jsonable(result), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
