from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from itemlens.adapters.sitecore import HttpHostClient
from itemlens.app import build_service
from itemlens.common import configure_logging
from itemlens.config import ConfigurationError
from itemlens.domain.identifiers import try_canonicalize_id

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from itemlens.app import ItemInformationState

log = logging.getLogger(__name__)


def _item_id(value: str) -> str:
    canonical = try_canonicalize_id(value)
    if canonical is None:
        raise argparse.ArgumentTypeError(f"invalid item id: {value!r}")
    return canonical


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare authoring and published state of Sitecore items"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every pipeline stage and HTTP request",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    items = subparsers.add_parser("items", help="Inspect the given item ids")
    items.add_argument(
        "ids",
        nargs="+",
        type=_item_id,
        help="Item ids (braced, hyphenated or 32-digit)",
    )
    items.add_argument(
        "--language",
        type=str,
        help="Content language (defaults to ITEMLENS_DEFAULT_LANGUAGE or 'en')",
    )
    items.add_argument(
        "--context-id",
        type=str,
        help="Tenant context id forwarded with authoring queries",
    )

    page = subparsers.add_parser("page", help="Inspect every item used by a page")
    page.add_argument(
        "--page-context",
        type=Path,
        required=True,
        help="JSON document holding the host page context",
    )
    page.add_argument(
        "--app-context",
        type=Path,
        help="JSON document holding the host application context",
    )
    page.add_argument(
        "--context-id",
        type=str,
        help="Tenant context id, used when no application context is given",
    )
    page.add_argument(
        "--language",
        type=str,
        help="Override the language found in the page context",
    )

    return parser.parse_args(list(argv))


def _print_state(state: ItemInformationState) -> None:
    if state.data is not None:
        print(json.dumps(state.data.to_dict(), indent=2))  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "items":
            host = HttpHostClient.from_files(context_id=parsed_args.context_id)
        else:
            host = HttpHostClient.from_files(
                page_context=parsed_args.page_context,
                app_context=parsed_args.app_context,
                context_id=parsed_args.context_id,
            )
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(1)

    try:
        service = build_service(host)
        if parsed_args.command == "items":
            state = service.run_for_identifiers(parsed_args.ids, language=parsed_args.language)
        else:
            if parsed_args.language:
                state = service.run_for_identifiers([], language=parsed_args.language)
            else:
                state = service.run_full_cycle()
    except Exception:
        log.exception("Fatal error while fetching item information")
        sys.exit(1)

    if state.error is not None:
        log.error("Item information unavailable: %s", state.error)
        sys.exit(1)
    _print_state(state)


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
