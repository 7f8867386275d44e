from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from .block_events import decode_event_batch, extract_auction_starts
from .config import Settings
from .errors import PayloadDecodeError
from .formatting import describe_auction, format_auction_alert
from .node_stream import TendermintBlockStream
from .telegram_notifier import TelegramNotifier
from .types import AuctionOccurrence

logger = logging.getLogger(__name__)


@dataclass
class Metrics:
    batches_seen: int = 0
    batches_skipped: int = 0
    auctions_seen: int = 0
    alerts_sent: int = 0
    alerts_undelivered: int = 0


class AlertService:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.metrics = Metrics()
        self.stream = TendermintBlockStream(settings.node_address)
        self.notifier = TelegramNotifier(timeout=settings.notify_timeout_seconds)

    async def run(self) -> None:
        health_task = None
        if self.settings.health_log_interval_seconds > 0:
            health_task = asyncio.create_task(self._health_loop())
        try:
            async for payload in self.stream.batches():
                await self._handle_batch(payload)
        finally:
            if health_task is not None:
                health_task.cancel()
                await asyncio.gather(health_task, return_exceptions=True)
            await self.notifier.close()

    async def _handle_batch(self, payload: Any) -> None:
        self.metrics.batches_seen += 1

        try:
            batch = decode_event_batch(payload)
            auctions = extract_auction_starts(batch)
        except PayloadDecodeError as exc:
            self.metrics.batches_skipped += 1
            logger.warning("Skipping malformed block events: %s", exc)
            return

        for auction in auctions:
            await self._handle_auction(auction)

    async def _handle_auction(self, auction: AuctionOccurrence) -> None:
        self.metrics.auctions_seen += 1
        logger.info("Auction started %s", describe_auction(auction))

        text = format_auction_alert(auction)
        try:
            delivered = await self.notifier.send(self.settings.target, text)
        except Exception as exc:
            delivered = False
            logger.exception("Failed to send alert for auction %s: %s", auction.auction_id, exc)

        if delivered:
            self.metrics.alerts_sent += 1
        else:
            self.metrics.alerts_undelivered += 1

    async def _health_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.health_log_interval_seconds)
            logger.info(
                (
                    "health batches_seen=%d batches_skipped=%d auctions_seen=%d "
                    "alerts_sent=%d alerts_undelivered=%d"
                ),
                self.metrics.batches_seen,
                self.metrics.batches_skipped,
                self.metrics.auctions_seen,
                self.metrics.alerts_sent,
                self.metrics.alerts_undelivered,
            )
