from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from erpcore.app import (
    create_client,
    create_product,
    delete_client,
    delete_product,
    initialise_database,
    update_client,
    update_product,
)
from erpcore.config import ConfigurationError, configure_logging
from erpcore.domain.errors import DomainError
from erpcore.domain.model import snapshot

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from erpcore.domain.aggregates import Aggregate

log = logging.getLogger(__name__)

_JSON = TypeAdapter(Any)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage erpcore aggregates")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (defaults to ERPCORE_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_db = subparsers.add_parser("init-db", help="Create or migrate the database schema")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URI overriding DATABASE_URI",
    )

    for aggregate in ("product", "client"):
        group = subparsers.add_parser(aggregate, help=f"{aggregate.title()} aggregate commands")
        actions = group.add_subparsers(dest="action", required=True)

        create = actions.add_parser("create", help=f"Create a {aggregate} from a JSON payload")
        create.add_argument("payload", type=str, help="Path to a JSON file, or - for stdin")

        update = actions.add_parser("update", help=f"Reconcile a {aggregate} with a JSON payload")
        update.add_argument("id", type=int, help=f"Identifier of the {aggregate}")
        update.add_argument("payload", type=str, help="Path to a JSON file, or - for stdin")

        delete = actions.add_parser("delete", help=f"Delete a {aggregate} and its children")
        delete.add_argument("id", type=int, help=f"Identifier of the {aggregate}")

    return parser.parse_args(list(argv))


def _read_payload(source: str) -> Any:
    try:
        if source == "-":
            return json.load(sys.stdin)
        with Path(source).open(encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON payload in {source}: {exc}") from exc


def aggregate_to_json(aggregate: Aggregate[Any]) -> dict[str, Any]:
    """Render an aggregate with ISO-8601 timestamps and decimals as strings."""

    document = {
        "root": snapshot(aggregate.root),
        **{
            name: [snapshot(item) for item in items]
            for name, items in aggregate.collections.items()
        },
    }
    return _JSON.dump_python(document, mode="json")


def _run_command(args: argparse.Namespace) -> Aggregate[Any] | None:
    if args.command == "init-db":
        initialise_database(args.database_uri)
        return None
    if args.command == "product":
        if args.action == "create":
            return create_product(_read_payload(args.payload))
        if args.action == "update":
            return update_product(args.id, _read_payload(args.payload))
        delete_product(args.id)
        log.info("Deleted product %s", args.id)
        return None
    if args.command == "client":
        if args.action == "create":
            return create_client(_read_payload(args.payload))
        if args.action == "update":
            return update_client(args.id, _read_payload(args.payload))
        delete_client(args.id)
        log.info("Deleted client %s", args.id)
        return None
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=parsed_args.log_level)

    try:
        aggregate = _run_command(parsed_args)
    except DomainError as exc:
        log.error("%s (status %s)", exc, exc.status_code)  # noqa: TRY400
        sys.exit(1)
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except (ValidationError, ValueError, OSError):
        log.exception("Invalid input")
        sys.exit(2)

    if aggregate is not None:
        json.dump(aggregate_to_json(aggregate), sys.stdout, indent=2)
        sys.stdout.write("\n")


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
