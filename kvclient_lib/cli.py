"""Command line access to the key-value store.

    kvclient keys
    kvclient get greeting
    kvclient set greeting '"hello"'
    kvclient delete greeting
    kvclient dump

The endpoint comes from ``--url``, the YAML config (``--config``) or the
environment, in that order.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Iterable, Optional, TextIO

from kvclient_lib.client import Client
from kvclient_lib.config.config import DEFAULT_CONFIG_PATH, load_config
from kvclient_lib.errors import KVClientError
from kvclient_lib.logging_config import configure_logging

logger = logging.getLogger(__name__)


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kvclient", description="Read and write a remote key-value store")
    p.add_argument("--url", help="Base endpoint URL of the store")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="YAML client config file")
    p.add_argument("--log-level", help="Override the configured log level")
    p.add_argument("--no-cache", action="store_true", help="Do not cache values read during this run")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("get", help="Print the value stored under KEY")
    g.add_argument("key")
    g.add_argument("--raw", action="store_true", help="Print the stored text without decoding")

    s = sub.add_parser("set", help="Store a JSON value under KEY")
    s.add_argument("key")
    s.add_argument("value", help="JSON text, e.g. '\"hello\"' or '{\"a\": 1}'")

    d = sub.add_parser("delete", help="Delete KEY")
    d.add_argument("key")

    sub.add_parser("keys", help="List every key")
    sub.add_parser("dump", help="Print every entry as a JSON object")
    return p


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = get_parser()
    if argv is not None:
        argv = list(argv)
    return parser.parse_args(argv)


def run_command(client: Client, args: argparse.Namespace, out: TextIO) -> int:
    if args.command == "get":
        value = client.get_sync(args.key, raw=args.raw)
        if args.raw:
            out.write(f"{value if value is not None else ''}\n")
        else:
            out.write(json.dumps(value) + "\n")
    elif args.command == "set":
        try:
            value = json.loads(args.value)
        except json.JSONDecodeError:
            # Bare words are stored as strings
            value = args.value
        client.set_sync(args.key, value)
    elif args.command == "delete":
        removed = client.delete_sync(args.key)
        out.write(("deleted" if removed else "not found") + "\n")
        return 0 if removed else 1
    elif args.command == "keys":
        for key in client.keys_sync():
            out.write(key + "\n")
    elif args.command == "dump":
        out.write(json.dumps(client.to_dict_sync(), indent=2) + "\n")
    return 0


def main(argv: Optional[Iterable[str]] = None, out: TextIO = sys.stdout) -> int:
    args = parse_args(argv)
    configure_logging(args.config, args.log_level)
    try:
        config = load_config(args.config)
        if args.url:
            config.endpoint_url = args.url
        if args.no_cache:
            config.do_cache = False
        with Client.from_config(config) as client:
            return run_command(client, args, out)
    except KVClientError as err:
        logger.debug("Command %s failed", args.command, exc_info=True)
        sys.stderr.write(f"kvclient: {err}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
