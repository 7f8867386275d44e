from __future__ import annotations

import argparse
import os
from collections.abc import Sequence
from dataclasses import dataclass

from dotenv import load_dotenv

from .types import NotificationTarget

SUBSCRIBE_AUCTIONS = "subscribe-auctions"


@dataclass(frozen=True)
class Settings:
    node_address: str
    target: NotificationTarget
    log_level: str
    notify_timeout_seconds: float
    health_log_interval_seconds: int


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip() or default


def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {raw}")
    return value


def _non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    # Defaults are read when the parser is built, after load_dotenv().
    parser = argparse.ArgumentParser(
        prog="auction-telegram-alerts",
        description="Forward auction start events from a Kava node to Telegram.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    subscribe = commands.add_parser(
        SUBSCRIBE_AUCTIONS,
        help="Listen for auction events on a node and send them to Telegram.",
        description="Subscribe to auction events produced by a node.",
    )
    subscribe.add_argument(
        "--node",
        default=_env("NODE_ADDRESS", "http://localhost:26657"),
        help="rpc node address (default: %(default)s)",
    )
    subscribe.add_argument("--bot-id", default=_env("TELEGRAM_BOT_ID"), help="telegram bot id")
    subscribe.add_argument("--chat-id", default=_env("TELEGRAM_CHAT_ID"), help="telegram chat id")
    subscribe.add_argument(
        "--log-level",
        default=_env("LOG_LEVEL", "INFO"),
        help="logging level (default: %(default)s)",
    )
    subscribe.add_argument(
        "--notify-timeout",
        type=_positive_float,
        default=_env("NOTIFY_TIMEOUT_SECONDS", "10"),
        help="seconds to wait for Telegram before giving up (default: %(default)s)",
    )
    subscribe.add_argument(
        "--health-interval",
        type=_non_negative_int,
        default=_env("HEALTH_LOG_INTERVAL_SECONDS", "300"),
        help="seconds between health log lines, 0 disables them (default: %(default)s)",
    )
    return parser


def load_settings(argv: Sequence[str] | None = None) -> Settings:
    load_dotenv()
    args = build_parser().parse_args(argv)
    return Settings(
        node_address=args.node.strip(),
        target=NotificationTarget(bot_id=args.bot_id.strip(), chat_id=args.chat_id.strip()),
        log_level=args.log_level.strip().upper(),
        notify_timeout_seconds=args.notify_timeout,
        health_log_interval_seconds=args.health_interval,
    )
