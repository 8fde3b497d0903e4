"""
dex-lookup command line interface.

Single entry point for every lookup.

Usage
-----
# Lookups
dex-lookup pokemon charizard            # species, types, weight, defensive matchups
dex-lookup ability "swift swim"
dex-lookup move thunderbolt
dex-lookup item "choice scarf"
dex-lookup type fire flying             # combined defensive matchups

# Configuration
dex-lookup config show
dex-lookup config set cache_dir ~/.cache/dex-lookup
dex-lookup config reset

# Cache
dex-lookup --refresh move tackle        # ignore cached responses
dex-lookup cache clear
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from configs.constants import Constants
from configs.settings import (
    apply_overrides,
    config_to_dict,
    load_config,
    reset_config,
    set_config_value,
)
from src.client.base import ClientConfig
from src.client.errors import DexLookupError
from src.client.pokeapi import PokeAPIClient
from src.lookup.commands import run_lookup
from src.lookup.output import capitalize
from utils.logger import logger, setup_logging


def _client_config(args: argparse.Namespace) -> ClientConfig:
    config = load_config(args.config)
    return apply_overrides(
        config,
        cache_dir=args.cache_dir,
        use_cache=False if args.refresh else None,
        max_workers=args.workers,
    )


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------


def cmd_lookup(args: argparse.Namespace) -> None:
    client = PokeAPIClient(config=_client_config(args))
    run_lookup(args.kind, client, args.text, sys.stdout)


def cmd_config_show(args: argparse.Namespace) -> None:
    config = load_config(args.config)
    for key, value in config_to_dict(config).items():
        print(f"{key}\t{value}")


def cmd_config_set(args: argparse.Namespace) -> None:
    set_config_value(args.key, args.value, args.config)
    print(f"{args.key} saved to {args.config or Constants.CONFIG_PATH}")


def cmd_config_reset(args: argparse.Namespace) -> None:
    reset_config(args.config)
    print(f"Configuration reset at {args.config or Constants.CONFIG_PATH}")


def cmd_cache_clear(args: argparse.Namespace) -> None:
    client = PokeAPIClient(config=_client_config(args))
    removed = client.clear_cache()
    print(f"Removed {removed} cached responses from {client.config.cache_dir}")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    root = argparse.ArgumentParser(
        prog="dex-lookup",
        description="Look up Pokemon, moves, abilities, items and type matchups on PokeAPI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    root.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    root.add_argument("--cache-dir", type=Path, default=None, metavar="DIR",
                      help="Response cache directory (overrides the config file)")
    root.add_argument("--config", type=Path, default=None, metavar="FILE",
                      help=f"Config file (default: {Constants.CONFIG_PATH})")
    root.add_argument("--refresh", action="store_true",
                      help="Ignore cached responses and fetch again")
    root.add_argument("--workers", type=int, default=None, metavar="N",
                      help="Concurrent fetches (overrides the config file)")

    subparsers = root.add_subparsers(dest="command", required=True)

    # ================================================================
    # lookups
    # ================================================================
    helps = {
        "pokemon": "Species, types, weight and defensive matchups",
        "ability": "Ability generation and effect",
        "move": "Move statistics and effect",
        "item": "Item category, fling data and effect",
    }
    for kind, help_text in helps.items():
        p = subparsers.add_parser(kind, help=help_text)
        p.add_argument("text", nargs="+", help=f"{capitalize(kind)} name")
        p.set_defaults(func=cmd_lookup, kind=kind)

    tp = subparsers.add_parser("type", help="Combined defensive matchups of one or more types")
    tp.add_argument("text", nargs="+", metavar="type", help="Type name(s)")
    tp.set_defaults(func=cmd_lookup, kind="type")

    # ================================================================
    # config
    # ================================================================
    config_p = subparsers.add_parser("config", help="Show or change stored settings")
    config_sub = config_p.add_subparsers(dest="action", required=True)

    config_sub.add_parser("show", help="Print the effective settings").set_defaults(
        func=cmd_config_show
    )
    cs = config_sub.add_parser("set", help="Store one setting")
    cs.add_argument("key", help="Setting name (e.g. cache_dir)")
    cs.add_argument("value", help="New value")
    cs.set_defaults(func=cmd_config_set)
    config_sub.add_parser("reset", help="Restore the default settings").set_defaults(
        func=cmd_config_reset
    )

    # ================================================================
    # cache
    # ================================================================
    cache_p = subparsers.add_parser("cache", help="Manage the response cache")
    cache_sub = cache_p.add_subparsers(dest="action", required=True)
    cache_sub.add_parser("clear", help="Delete every cached response").set_defaults(
        func=cmd_cache_clear
    )

    return root


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        args.func(args)
    except DexLookupError as exc:
        logger.debug("Lookup failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
