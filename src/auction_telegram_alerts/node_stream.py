from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from .errors import StartupError, SubscriptionError, TransportDecodeError, TransportError

logger = logging.getLogger(__name__)

NEW_BLOCK_QUERY = "tm.event='NewBlock'"
SUBSCRIBE_REQUEST_ID = 0


class TendermintBlockStream:
    """Subscription to a node's new-block events over its websocket RPC.

    There is no reconnect: once the stream fails the caller is expected to
    exit and be restarted from outside.
    """

    def __init__(
        self,
        node_address: str,
        subscribe_timeout: float = 10.0,
        max_frame_size: int | None = None,
    ) -> None:
        self.node_address = node_address
        self.subscribe_timeout = subscribe_timeout
        # NewBlock frames carry the whole block, None lifts the 1 MiB default.
        self.max_frame_size = max_frame_size

    async def batches(self) -> AsyncIterator[Any]:
        url = websocket_url(self.node_address)
        try:
            ws = await websockets.connect(
                url, ping_interval=20, ping_timeout=20, max_size=self.max_frame_size
            )
        except (OSError, asyncio.TimeoutError, InvalidURI, InvalidHandshake) as exc:
            raise StartupError(f"can't connect to node {url}: {exc}") from exc

        try:
            await self._subscribe(ws)
            logger.info("Listening for auctions on %s", url)

            async for raw in ws:
                events = parse_rpc_frame(raw)
                if events is not None:
                    yield events
        except ConnectionClosed as exc:
            raise TransportError(f"connection to node lost: {exc}") from exc
        finally:
            await ws.close()

        raise TransportError("node closed the subscription stream")

    async def _subscribe(self, ws: Any) -> None:
        await ws.send(
            json.dumps(
                {
                    "jsonrpc": "2.0",
                    "method": "subscribe",
                    "id": SUBSCRIBE_REQUEST_ID,
                    "params": {"query": NEW_BLOCK_QUERY},
                }
            )
        )
        try:
            raw = await asyncio.wait_for(ws.recv(), self.subscribe_timeout)
        except asyncio.TimeoutError as exc:
            raise SubscriptionError("node did not acknowledge the subscription") from exc
        except ConnectionClosed as exc:
            raise SubscriptionError(f"can't subscribe to node: {exc}") from exc

        try:
            reply = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SubscriptionError(f"unreadable subscription reply: {raw!r}") from exc
        if not isinstance(reply, dict) or reply.get("error"):
            error = reply.get("error") if isinstance(reply, dict) else reply
            raise SubscriptionError(f"can't subscribe to node: {error}")


def websocket_url(node_address: str) -> str:
    try:
        url = httpx.URL(node_address.strip())
    except httpx.InvalidURL as exc:
        raise StartupError(f"invalid node address {node_address!r}: {exc}") from exc

    schemes = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}
    if url.scheme not in schemes or not url.host:
        raise StartupError(f"invalid node address {node_address!r}")

    path = url.path.rstrip("/")
    if not path.endswith("/websocket"):
        path = f"{path}/websocket"
    return str(url.copy_with(scheme=schemes[url.scheme], path=path))


def parse_rpc_frame(raw: str | bytes) -> Any | None:
    """Return the block events carried by one JSON-RPC frame.

    ``None`` means the frame carries no events (e.g. an empty ``result``).
    The events value itself is not validated here.
    """
    try:
        frame = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TransportDecodeError(f"frame is not JSON: {exc}") from exc

    if not isinstance(frame, dict):
        raise TransportDecodeError(f"frame is not a JSON-RPC object: {type(frame).__name__}")
    if frame.get("error"):
        raise TransportError(f"node reported an error: {frame['error']}")

    result = frame.get("result")
    if not result:
        return None
    if not isinstance(result, dict):
        raise TransportDecodeError(f"unexpected result type {type(result).__name__}")
    return result.get("events", {})
