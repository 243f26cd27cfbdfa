"""
Top-level CLI dispatcher: version-watch <command> [args...].

Commands wait on the request handle with a deadline because a non-200
response fires no callback.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from typing import Any, Dict, List, Optional

from .. import config
from ..defaults import create_latest_checker, create_list_fetcher, create_version_store
from ..versions.base import ByBranch, SelectionRule, TopPrs

EXIT_OK = 0
EXIT_UPDATE_AVAILABLE = 1
EXIT_NO_ANSWER = 2

# Extra seconds past the request timeout before giving up on a callback.
_WAIT_GRACE_S = 1.0


def _default_wait() -> float:
    return config.http_timeout_ms() / 1000.0 + _WAIT_GRACE_S


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _main_check(args: argparse.Namespace) -> int:
    url = args.url or config.latest_url()
    if not url:
        print("No latest-version URL (use --url or endpoints.latest_url)", file=sys.stderr)
        return EXIT_NO_ANSWER

    store = create_version_store(args.store)
    checker = create_latest_checker(store)
    answered = threading.Event()
    result: Dict[str, Any] = {}

    def _callback(*new_version: str) -> None:
        result["version"] = new_version[0] if new_version else None
        answered.set()

    checker.fetch_latest_version(url, _callback)
    wait_s = args.wait if args.wait is not None else _default_wait()
    if not answered.wait(wait_s):
        print(f"No answer from {url} within {wait_s:.1f}s", file=sys.stderr)
        return EXIT_NO_ANSWER

    current = store.get_current()
    latest = result.get("version")
    if latest is None:
        print(f"Could not check {url}; current version is {current}")
        return EXIT_NO_ANSWER
    print(f"Current version: {current}")
    print(f"Latest version: {latest}")
    if store.did_update():
        print("Update available.")
        return EXIT_UPDATE_AVAILABLE
    print("Up to date.")
    return EXIT_OK


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def _rules_from_args(args: argparse.Namespace) -> Optional[List[SelectionRule]]:
    rules: List[SelectionRule] = []
    if args.prs is not None:
        rules.append(TopPrs(args.prs))
    for name in args.branch or ():
        rules.append(ByBranch(name))
    return rules or None


def _main_list(args: argparse.Namespace) -> int:
    url = args.url or config.versions_url()
    if not url:
        print("No versions URL (use --url or endpoints.versions_url)", file=sys.stderr)
        return EXIT_NO_ANSWER

    fetcher = create_list_fetcher()
    answered = threading.Event()
    result: Dict[str, Any] = {"ok": False, "versions": []}

    def _on_success(versions: List[Any]) -> None:
        result["ok"] = True
        result["versions"] = versions
        answered.set()

    def _on_error() -> None:
        answered.set()

    fetcher.fetch_all_versions(url, _on_success, _on_error, _rules_from_args(args))
    wait_s = args.wait if args.wait is not None else _default_wait()
    if not answered.wait(wait_s):
        print(f"No answer from {url} within {wait_s:.1f}s", file=sys.stderr)
        return EXIT_NO_ANSWER
    if not result["ok"]:
        print(f"Could not list versions from {url}", file=sys.stderr)
        return EXIT_NO_ANSWER
    for entry in result["versions"]:
        print(json.dumps(entry, sort_keys=True))
    return EXIT_OK


def _main_current(args: argparse.Namespace) -> int:
    store = create_version_store(args.store)
    if args.clear:
        store.set_current(None)
    elif args.value is not None:
        store.set_current(args.value)
    current = store.get_current()
    print(current if current is not None else "(unset)")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="version-watch",
        description="Check the running version against the published one",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--store", default=None, help="SQLite file for the current version")
    subparsers = parser.add_subparsers(dest="command", help="command")

    p_check = subparsers.add_parser("check", help="Fetch the latest version and compare")
    p_check.add_argument("--url", default=None)
    p_check.add_argument("--wait", type=float, default=None, help="seconds to wait for an answer")

    p_list = subparsers.add_parser("list", help="List candidate versions")
    p_list.add_argument("--url", default=None)
    p_list.add_argument("--prs", type=_non_negative_int, default=None, help="newest N PR builds")
    p_list.add_argument("--branch", action="append", default=None, help="builds on this branch")
    p_list.add_argument("--wait", type=float, default=None, help="seconds to wait for an answer")

    p_current = subparsers.add_parser("current", help="Show or set the current version")
    p_current.add_argument("value", nargs="?", default=None)
    p_current.add_argument("--clear", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_OK

    _configure_logging(args.verbose)
    if args.command == "check":
        return _main_check(args)
    if args.command == "list":
        return _main_list(args)
    if args.command == "current":
        return _main_current(args)
    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
