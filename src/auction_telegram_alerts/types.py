from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class EventBatch:
    """Events of one block, keyed by ``"<category>.<attribute>"``.

    Attribute tuples of the same category are index aligned: position ``i``
    across them describes one occurrence of the event.
    """

    attributes: Mapping[str, tuple[str, ...]]

    def get(self, category: str, attribute: str) -> tuple[str, ...]:
        return self.attributes.get(f"{category}.{attribute}", ())

    def category(self, name: str) -> dict[str, tuple[str, ...]]:
        prefix = f"{name}."
        return {
            key[len(prefix) :]: values
            for key, values in self.attributes.items()
            if key.startswith(prefix)
        }


@dataclass(frozen=True)
class AuctionOccurrence:
    auction_id: str
    auction_type: str
    bid: str
    lot: str
    max_bid: str


@dataclass(frozen=True)
class NotificationTarget:
    bot_id: str
    chat_id: str

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_id and self.chat_id)
