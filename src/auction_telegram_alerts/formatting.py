from __future__ import annotations

from .types import AuctionOccurrence


def format_auction_alert(auction: AuctionOccurrence) -> str:
    return (
        "🔨 <b>New Auction Started</b>\n\n"
        f"<b>ID:</b> {auction.auction_id}\n"
        f"<b>Type:</b> {auction.auction_type}\n"
        f"<b>Bid:</b> {auction.bid}\n"
        f"<b>Lot:</b> {auction.lot}\n"
        f"<b>Max Bid:</b> {auction.max_bid}"
    )


def describe_auction(auction: AuctionOccurrence) -> str:
    return (
        f"id={auction.auction_id} type={auction.auction_type} bid={auction.bid} "
        f"lot={auction.lot} max_bid={auction.max_bid}"
    )
