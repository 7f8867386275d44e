from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from .errors import PayloadDecodeError
from .types import AuctionOccurrence, EventBatch

AUCTION_START = "auction_start"
AUCTION_START_ATTRIBUTES = ("auction_id", "auction_type", "bid", "lot", "max_bid")

KNOWN_CATEGORIES = frozenset({AUCTION_START})
KNOWN_KEYS = frozenset(f"{AUCTION_START}.{attribute}" for attribute in AUCTION_START_ATTRIBUTES)


def decode_event_batch(payload: Any) -> EventBatch:
    """Keep the known attributes of a raw block payload.

    Keys outside ``KNOWN_KEYS`` are dropped whatever their value, so new event
    types or attributes emitted by newer node versions never break decoding.
    """
    if not isinstance(payload, Mapping):
        raise PayloadDecodeError(f"block events must be an object, got {type(payload).__name__}")

    attributes: dict[str, tuple[str, ...]] = {}
    for key, raw in payload.items():
        if key not in KNOWN_KEYS:
            continue
        attributes[key] = _string_values(key, raw)

    batch = EventBatch(MappingProxyType(attributes))
    for category in KNOWN_CATEGORIES:
        _check_aligned(category, batch.category(category))
    return batch


def extract_auction_starts(batch: EventBatch) -> list[AuctionOccurrence]:
    ids = batch.get(AUCTION_START, "auction_id")
    if not ids:
        return []

    columns = []
    for attribute in AUCTION_START_ATTRIBUTES:
        values = batch.get(AUCTION_START, attribute)
        if len(values) != len(ids):
            raise PayloadDecodeError(
                f"{AUCTION_START}.{attribute} has {len(values)} values, expected {len(ids)}"
            )
        columns.append(values)

    return [AuctionOccurrence(*row) for row in zip(*columns)]


def _string_values(key: Any, raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        raise PayloadDecodeError(f"{key} must be a list of strings, got {type(raw).__name__}")
    for value in raw:
        if not isinstance(value, str):
            raise PayloadDecodeError(f"{key} contains non-string value {value!r}")
    return tuple(raw)


def _check_aligned(category: str, columns: dict[str, tuple[str, ...]]) -> None:
    lengths = {attribute: len(values) for attribute, values in columns.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={size}" for name, size in sorted(lengths.items()))
        raise PayloadDecodeError(f"{category} attributes are not index aligned ({detail})")
