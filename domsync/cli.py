"""Watch a resource's update stream and apply it to a local document."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
import contextlib
from pathlib import Path

from domsync.sync.client import SyncClient
from domsync.document.tree import Document
from domsync.runtime.logging import configure_logging
from domsync.runtime.settings_loader import load_settings
from domsync.state.callbacks import SubscriptionCallbacks
from domsync.state.update import Update, ApplyResult, DecodeFailure
from domsync.config import DEFAULT_ECHO_TTL_MS, DEFAULT_RECONNECT_MAX_DELAY_MS, DEFAULT_RECONNECT_INITIAL_DELAY_MS

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply server-pushed DOM updates to a local document")
    parser.add_argument("resource", help="Resource URL; http(s) is mapped to ws(s)")
    parser.add_argument("--secure", action="store_true", help="Use WSS for bare host:port resources")
    parser.add_argument("--document", type=Path, default=None, help="HTML file to load as the local document")
    parser.add_argument("--no-reconnect", action="store_true", help="Do not reconnect")
    parser.add_argument(
        "--initial-delay-ms",
        type=int,
        default=None,
        help=f"First reconnect delay (env or {DEFAULT_RECONNECT_INITIAL_DELAY_MS})",
    )
    parser.add_argument(
        "--max-delay-ms",
        type=int,
        default=None,
        help=f"Reconnect delay ceiling (env or {DEFAULT_RECONNECT_MAX_DELAY_MS})",
    )
    parser.add_argument("--echo-ttl-ms", type=int, default=None, help=f"Echo TTL (env or {DEFAULT_ECHO_TTL_MS})")
    parser.add_argument("--print-document", action="store_true", help="Print the document after every update")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_document(path: Path | None) -> Document:
    if path is None:
        return Document.empty()
    return Document.from_html(path.read_text(encoding="utf-8"))


def _callbacks(document: Document, *, print_document: bool) -> SubscriptionCallbacks:
    def on_update(update: Update, result: ApplyResult) -> None:
        print(f"{update.method} {update.address} -> {result.action}")
        if print_document:
            print(document.to_html())

    def on_apply_error(update: Update, reason: str) -> None:
        print(f"{update.method} {update.address} failed: {reason}", file=sys.stderr)

    def on_decode_error(failure: DecodeFailure) -> None:
        print(f"section {failure.index} undecodable: {failure.reason} {failure.message}", file=sys.stderr)

    return SubscriptionCallbacks(
        on_connect=lambda sub: logger.info("connected to %s", sub.resource),
        on_disconnect=lambda sub: logger.info("disconnected from %s", sub.resource),
        on_update=on_update,
        on_apply_error=on_apply_error,
        on_decode_error=on_decode_error,
        on_reconnect_scheduled=lambda delay, attempt: logger.info("retry %d in %d ms", attempt, delay),
    )


async def run(args: argparse.Namespace) -> None:
    document = load_document(args.document)
    settings = load_settings(
        reconnect=False if args.no_reconnect else None,
        initial_delay_ms=args.initial_delay_ms,
        max_delay_ms=args.max_delay_ms,
        echo_ttl_ms=args.echo_ttl_ms,
    )
    async with SyncClient(document, settings=settings, secure=args.secure) as client:
        subscription = client.subscribe(
            args.resource,
            _callbacks(document, print_document=args.print_document),
        )
        stop = asyncio.Event()
        with contextlib.suppress(asyncio.CancelledError):
            await stop.wait()
        await subscription.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging("DEBUG" if args.debug else None)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run(args))


if __name__ == "__main__":
    main()
