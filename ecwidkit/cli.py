"""The ``ecwid`` command-line tool."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import IO, Any, Callable, Optional, Sequence

from . import carts as carts_api
from . import categories as categories_api
from .client import APIError, Client, Requester, new_client
from .cmdutil import CommandError, output_result
from .loader import FLAG_BINDINGS, load

_APP_VERSION = "dev"
_LOGGER_NAME = "ecwidkit"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_LEVELS = {
    "debug": logging.DEBUG,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}

Handler = Callable[[Client, argparse.Namespace, IO[str]], None]


class _JSONFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class _JSONHandler(logging.StreamHandler):
    """Marker type so the handler can be replaced when the level changes."""


def set_log_level(level: str) -> int:
    """Install JSON logging on stderr at the named level and return that level."""
    numeric = _LEVELS.get(level, logging.INFO)
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _JSONHandler)]:
        root.removeHandler(existing)
    handler = _JSONHandler(sys.stderr)
    handler.setFormatter(_JSONFormatter())
    root.addHandler(handler)
    root.setLevel(numeric)
    return numeric


def _parse_int64(arg: str) -> int:
    if not _INT_PATTERN.fullmatch(arg):
        raise ValueError("invalid syntax")
    value = int(arg)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError("value out of range")
    return value


def _parse_category_id(arg: str) -> int:
    try:
        value = _parse_int64(arg)
    except ValueError as exc:
        raise CommandError(f'invalid category ID "{arg}": {exc}') from None
    if value <= 0:
        raise CommandError(f"category ID must be a positive integer, got {value}")
    return value


# --- carts -----------------------------------------------------------------


def _carts_list(client: Client, args: argparse.Namespace, out: IO[str]) -> None:
    opts = carts_api.SearchOptions(
        customer_id=args.customer_id, limit=args.limit, offset=args.offset
    )
    output_result(client.carts.search(opts), args.output, out)


def _carts_get(client: Client, args: argparse.Namespace, out: IO[str]) -> None:
    output_result(client.carts.get(args.cart_id), args.output, out)


def _carts_update(client: Client, args: argparse.Namespace, out: IO[str]) -> None:
    req = carts_api.UpdateRequest(hidden=args.hidden)
    output_result(client.carts.update(args.cart_id, req), args.output, out)


def _carts_place(client: Client, args: argparse.Namespace, out: IO[str]) -> None:
    output_result(client.carts.place(args.cart_id), args.output, out)


# --- categories ------------------------------------------------------------


def _categories_list(client: Client, args: argparse.Namespace, out: IO[str]) -> None:
    opts = categories_api.SearchOptions(
        keyword=args.keyword, parent=args.parent, limit=args.limit, offset=args.offset
    )
    result = client.categories.search(opts)
    output_result(result.items, args.output, out)


def _categories_get(client: Client, args: argparse.Namespace, out: IO[str]) -> None:
    category_id = _parse_category_id(args.category_id)
    output_result(client.categories.get(category_id), args.output, out)


def _categories_create(
    client: Client, args: argparse.Namespace, out: IO[str]
) -> None:
    if not args.name:
        raise CommandError("--name is required")
    category = categories_api.Category(
        name=args.name,
        parent_id=args.parent_id,
        description=args.description,
        enabled=args.enabled,
    )
    output_result(client.categories.create(category), args.output, out)


def _categories_update(
    client: Client, args: argparse.Namespace, out: IO[str]
) -> None:
    category_id = _parse_category_id(args.category_id)
    category = categories_api.Category()
    if args.name is not None:
        category.name = args.name
    if args.parent_id is not None:
        category.parent_id = args.parent_id
    if args.description is not None:
        category.description = args.description
    if args.enabled is not None:
        category.enabled = args.enabled
    if args.parent_id is not None and args.parent_id == 0:
        raise CommandError(
            "--parent-id 0 is not supported: "
            "parentId=0 cannot be expressed in the request payload"
        )
    if all(
        value is None
        for value in (args.name, args.parent_id, args.description, args.enabled)
    ):
        raise CommandError("no fields specified to update")
    output_result(client.categories.update(category_id, category), args.output, out)


def _categories_delete(
    client: Client, args: argparse.Namespace, out: IO[str]
) -> None:
    category_id = _parse_category_id(args.category_id)
    output_result(client.categories.delete(category_id), args.output, out)


# --- parser ----------------------------------------------------------------


def _global_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", default=argparse.SUPPRESS,
        help="config file (default: ~/.ecwid.yaml)",
    )
    common.add_argument(
        "--store-id", default=argparse.SUPPRESS,
        help="Ecwid store ID (env: ECWID_STORE_ID)",
    )
    common.add_argument(
        "--token", default=argparse.SUPPRESS,
        help="API access token (env: ECWID_TOKEN)",
    )
    common.add_argument(
        "--output", default=argparse.SUPPRESS,
        help="output format: json|table (default: json)",
    )
    common.add_argument(
        "--log-level", default=argparse.SUPPRESS,
        help="log level: debug|info|warn|error (default: info)",
    )
    common.add_argument(
        "--base-url", default=argparse.SUPPRESS,
        help="API base URL (env: ECWID_BASE_URL)",
    )
    common.add_argument(
        "--max-retries", type=int, default=argparse.SUPPRESS,
        help="max retries on rate limit (env: ECWID_MAX_RETRIES)",
    )
    return common


def _add_carts(commands: Any, common: argparse.ArgumentParser) -> None:
    carts = commands.add_parser("carts", help="Manage abandoned carts")
    actions = carts.add_subparsers(dest="action", metavar="<command>", required=True)

    list_cmd = actions.add_parser(
        "list", parents=[common], help="List abandoned carts"
    )
    list_cmd.add_argument("--customer-id", type=int, default=0,
                          help="Filter by customer ID")
    list_cmd.add_argument(
        "--limit", type=int, default=0,
        help="Maximum number of carts to return (0 = API default)",
    )
    list_cmd.add_argument(
        "--offset", type=int, default=0,
        help="Number of carts to skip for pagination (0 = start from beginning)",
    )
    list_cmd.set_defaults(handler=_carts_list)

    get_cmd = actions.add_parser(
        "get", parents=[common], help="Get an abandoned cart by ID"
    )
    get_cmd.add_argument("cart_id", metavar="cartId")
    get_cmd.set_defaults(handler=_carts_get)

    update_cmd = actions.add_parser(
        "update", parents=[common], help="Update an abandoned cart"
    )
    update_cmd.add_argument("cart_id", metavar="cartId")
    update_cmd.add_argument(
        "--hidden", action=argparse.BooleanOptionalAction, default=None,
        help="Mark cart as hidden",
    )
    update_cmd.set_defaults(handler=_carts_update)

    place_cmd = actions.add_parser(
        "place", parents=[common], help="Convert an abandoned cart into an order"
    )
    place_cmd.add_argument("cart_id", metavar="cartId")
    place_cmd.set_defaults(handler=_carts_place)


def _add_categories(commands: Any, common: argparse.ArgumentParser) -> None:
    categories = commands.add_parser("categories", help="Manage store categories")
    actions = categories.add_subparsers(
        dest="action", metavar="<command>", required=True
    )

    list_cmd = actions.add_parser("list", parents=[common], help="List categories")
    list_cmd.add_argument("--keyword", default="", help="filter by keyword")
    list_cmd.add_argument("--parent", type=int, default=0,
                          help="filter by parent category ID")
    list_cmd.add_argument("--limit", type=int, default=0,
                          help="maximum number of results")
    list_cmd.add_argument("--offset", type=int, default=0,
                          help="result offset for pagination")
    list_cmd.set_defaults(handler=_categories_list)

    get_cmd = actions.add_parser("get", parents=[common], help="Get a category by ID")
    get_cmd.add_argument("category_id", metavar="categoryId")
    get_cmd.set_defaults(handler=_categories_get)

    create_cmd = actions.add_parser(
        "create", parents=[common], help="Create a new category"
    )
    create_cmd.add_argument("--name", required=True, help="category name (required)")
    create_cmd.add_argument("--parent-id", type=int, default=0,
                            help="parent category ID")
    create_cmd.add_argument("--description", default="",
                            help="category description")
    create_cmd.add_argument(
        "--enabled", action=argparse.BooleanOptionalAction, default=True,
        help="whether the category is enabled",
    )
    create_cmd.set_defaults(handler=_categories_create)

    update_cmd = actions.add_parser(
        "update", parents=[common], help="Update an existing category"
    )
    update_cmd.add_argument("category_id", metavar="categoryId")
    update_cmd.add_argument("--name", default=None, help="category name")
    update_cmd.add_argument("--parent-id", type=int, default=None,
                            help="parent category ID")
    update_cmd.add_argument("--description", default=None,
                            help="category description")
    update_cmd.add_argument(
        "--enabled", action=argparse.BooleanOptionalAction, default=None,
        help="whether the category is enabled",
    )
    update_cmd.set_defaults(handler=_categories_update)

    delete_cmd = actions.add_parser(
        "delete", parents=[common], help="Delete a category by ID"
    )
    delete_cmd.add_argument("category_id", metavar="categoryId")
    delete_cmd.set_defaults(handler=_categories_delete)


def build_parser() -> argparse.ArgumentParser:
    """Return the parser for the whole command tree."""
    common = _global_options()
    parser = argparse.ArgumentParser(
        prog="ecwid",
        description=(
            "Command-line interface for the Ecwid REST API.\n"
            "Manage products, orders, customers, and more from your terminal."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[common],
    )
    parser.set_defaults(
        config=None,
        store_id=None,
        token=None,
        output=None,
        log_level=None,
        base_url=None,
        max_retries=None,
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>", required=True)
    version_cmd = commands.add_parser("version", parents=[common],
                                      help="Print the version")
    version_cmd.set_defaults(handler=None)
    _add_carts(commands, common)
    _add_categories(commands, common)
    return parser


def _client_from_config(args: argparse.Namespace) -> Client:
    flags = {
        flag_name: getattr(args, key, None)
        for flag_name, key in FLAG_BINDINGS.items()
    }
    try:
        cfg = load(args.config or "", flags)
    except ValueError as exc:
        raise CommandError(f"load config: {exc}") from exc
    set_log_level(cfg.log_level)
    cfg.validate()
    requester = Requester(
        base_url=cfg.base_url,
        store_id=cfg.store_id,
        token=cfg.token,
        max_retries=cfg.max_retries,
        logger=logging.getLogger(_LOGGER_NAME),
    )
    return new_client(requester)


def main(
    argv: Optional[Sequence[str]] = None, client: Optional[Client] = None
) -> int:
    """Run the command line and return the process exit status.

    When ``client`` is given it is used as is and no configuration is loaded.
    """
    set_log_level("info")
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    out = sys.stdout
    if args.command == "version":
        out.write(f"ecwid-cli {_APP_VERSION}\n")
        return 0

    try:
        app_client = client if client is not None else _client_from_config(args)
        args.handler(app_client, args, out)
    except (CommandError, APIError, ValueError, OSError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())