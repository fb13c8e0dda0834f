"""Runtime harness: build the contract table, open the stream and print quotes."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from contextlib import suppress
from pathlib import Path
from typing import Any, Iterable, Mapping, MutableMapping, Optional

from dotenv import load_dotenv

from common import VenueSettings, load_config, log_level_from_config, setup_logging
from contracts import ContractSpecTable, as_option
from stream import BookTop, MarketDataClient

logger = logging.getLogger(__name__)


def _as_mapping(value: object) -> MutableMapping[str, Any]:
    if isinstance(value, MutableMapping):
        return value
    return {}


def format_book_top(table: ContractSpecTable, book_top: BookTop) -> Optional[str]:
    """Describe ``book_top`` using its option label, or ``None`` if it cannot be joined."""

    option = as_option(table.lookup_by_id(book_top.contract_id))
    if option is None:
        return None
    return (
        f"{option.label}: {book_top.bid} @ {book_top.ask}, "
        f"{book_top.bid_size}x{book_top.ask_size}"
    )


class FeedRuntime:
    """Pull events from one connection and join top-of-book updates to contracts."""

    def __init__(self, config_path: Path, max_events: Optional[int] = None) -> None:
        self.config_path = config_path
        self.max_events = max_events
        self._stop_event = asyncio.Event()

    async def run(self) -> None:
        load_dotenv()
        config = load_config(self.config_path)

        level, log_file = log_level_from_config(_as_mapping(config.get("logging")))
        setup_logging(level, log_file)
        logger.info("Starting feed runtime", extra={"config": str(self.config_path)})

        settings = VenueSettings.from_config(config)
        limit = self.max_events if self.max_events is not None else settings.max_events

        table = await ContractSpecTable.build(
            api_url=settings.api_url,
            unknown_contract_policy=settings.unknown_contract_policy,
        )

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with suppress(NotImplementedError):
                loop.add_signal_handler(sig, self._stop_event.set)

        async with await MarketDataClient.connect(settings.ws_url) as client:
            await self.consume(client, table, limit)
        logger.info("Feed runtime stopped")

    async def consume(
        self, client: MarketDataClient, table: ContractSpecTable, limit: int = 0
    ) -> int:
        """Pull up to ``limit`` events (``0`` means until stopped); return the count."""

        count = 0
        while not self._stop_event.is_set():
            if limit and count >= limit:
                break
            event = await client.next_event()
            count += 1
            if isinstance(event, BookTop):
                line = format_book_top(table, event)
                if line is not None:
                    logger.info(line)
                elif event.contract_id not in table:
                    logger.debug("Book top for unknown contract %d", event.contract_id)
            else:
                logger.debug("Event: %r", event)
        return count

    def stop(self) -> None:
        self._stop_event.set()


async def run_feed(config_path: str, max_events: Optional[int] = None) -> None:
    runtime = FeedRuntime(Path(config_path), max_events=max_events)
    try:
        await runtime.run()
    except Exception:
        logger.exception("Feed runtime halted")
        raise


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream top-of-book updates for listed contracts")
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--max-events",
        type=int,
        default=None,
        help="Stop after this many events (overrides app.max_events; 0 runs until stopped)",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    asyncio.run(run_feed(args.config, max_events=args.max_events))


if __name__ == "__main__":  # pragma: no cover - CLI execution path
    main()
