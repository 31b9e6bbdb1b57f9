"""recordbase CLI — inspect and edit a filesystem record store.

Usage:
    python -m recordbase get KEY                      Print a record
    python -m recordbase save KEY TYPE [f=v ...]      Create or replace a record
    python -m recordbase delete KEY                   Delete a record
    python -m recordbase query TYPE [--sort F] [--desc]
    python -m recordbase subscribe FILE               Load YAML subscriptions
    python -m recordbase match KEY                    Subscriptions matching a record
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from recordbase.config.settings import get_settings
from recordbase.config.subscriptions import SubscriptionRegistry
from recordbase.exceptions import RecordbaseError
from recordbase.schemas.enums import SortOrder
from recordbase.schemas.query import Query, Sort
from recordbase.schemas.record import Record
from recordbase.storage import fs
from recordbase.storage.base import Database
from recordbase.utils.logging import configure_logging

logger = structlog.get_logger()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="recordbase",
        description="recordbase — typed record store",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.data_dir,
        help=f"Storage root directory (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--namespace",
        default=settings.namespace,
        help=f"Application namespace (default: {settings.namespace})",
    )
    parser.add_argument(
        "--user",
        default=None,
        help="Use this user's private database instead of the public one",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level,
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    get = subparsers.add_parser("get", help="Print the record stored under KEY")
    get.add_argument("key")

    save = subparsers.add_parser("save", help="Create or replace a record")
    save.add_argument("key")
    save.add_argument("type")
    save.add_argument(
        "fields",
        nargs="*",
        metavar="FIELD=VALUE",
        help="Field assignments; values are JSON scalars, else strings",
    )

    delete = subparsers.add_parser("delete", help="Delete the record stored under KEY")
    delete.add_argument("key")

    query = subparsers.add_parser("query", help="List records of TYPE")
    query.add_argument("type")
    query.add_argument("--sort", default=None, help="Field to sort by")
    query.add_argument("--desc", action="store_true", help="Sort descending")

    subscribe = subparsers.add_parser("subscribe", help="Save subscriptions from a YAML file")
    subscribe.add_argument("file", type=Path)

    match = subparsers.add_parser("match", help="List subscriptions matching a record")
    match.add_argument("key")

    return parser.parse_args(argv)


def parse_field(assignment: str) -> tuple[str, Any]:
    """Split FIELD=VALUE, decoding VALUE as a JSON scalar when possible."""
    name, sep, text = assignment.partition("=")
    if not sep or not name:
        raise ValueError(f"Expected FIELD=VALUE, got: {assignment}")
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return name, text
    if isinstance(value, (list, dict)):
        return name, text
    return name, value


def _print_record(record: Record) -> None:
    print(record.to_document())


def _cmd_get(db: Database, args: argparse.Namespace) -> int:
    _print_record(db.get(args.key))
    return 0


def _cmd_save(db: Database, args: argparse.Namespace) -> int:
    fields = dict(parse_field(a) for a in args.fields)
    db.save(Record(key=args.key, type=args.type, fields=fields))
    logger.info("Record saved", key=args.key, type=args.type)
    return 0


def _cmd_delete(db: Database, args: argparse.Namespace) -> int:
    db.delete(args.key)
    logger.info("Record deleted", key=args.key)
    return 0


def _cmd_query(db: Database, args: argparse.Namespace) -> int:
    sorts: tuple[Sort, ...] = ()
    if args.sort:
        order = SortOrder.DESCENDING if args.desc else SortOrder.ASCENDING
        sorts = (Sort(field_path=args.sort, order=order),)

    count = 0
    with db.query(Query(type=args.type, sorts=sorts)) as rows:
        for record in rows:
            _print_record(record)
            count += 1
    logger.info("Query complete", type=args.type, count=count)
    return 0


def _cmd_subscribe(db: Database, args: argparse.Namespace) -> int:
    registry = SubscriptionRegistry.from_yaml(args.file)
    for subscription in registry:
        db.save_subscription(subscription)
    print(f"Saved {len(registry)} subscription(s)")
    return 0


def _cmd_match(db: Database, args: argparse.Namespace) -> int:
    record = db.get(args.key)
    for subscription in sorted(db.get_matching_subscriptions(record), key=lambda s: s.key):
        print(f"{subscription.key}\t{subscription.query.type}")
    return 0


COMMANDS = {
    "get": _cmd_get,
    "save": _cmd_save,
    "delete": _cmd_delete,
    "query": _cmd_query,
    "subscribe": _cmd_subscribe,
    "match": _cmd_match,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(json_output=False, level=args.log_level)

    try:
        with fs.open(args.namespace, args.data_dir, settings=get_settings()) as conn:
            db = conn.private_db(args.user) if args.user else conn.public_db()
            return COMMANDS[args.command](db, args)
    except (RecordbaseError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
