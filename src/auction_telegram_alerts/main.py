from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence

from .config import Settings, load_settings
from .errors import StartupError, TransportError
from .service import AlertService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs request URLs at INFO, and the Telegram URL carries the bot token.
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def _main(settings: Settings) -> None:
    service = AlertService(settings)
    await service.run()


def main(argv: Sequence[str] | None = None) -> int:
    settings = load_settings(argv)
    configure_logging(settings.log_level)
    if not settings.target.is_configured:
        logger.warning("Telegram bot id or chat id not set, alerts will only be logged")

    try:
        asyncio.run(_main(settings))
    except KeyboardInterrupt:
        return 0
    except StartupError as exc:
        logger.error("Startup failed: %s", exc)
        return 1
    except TransportError as exc:
        logger.error("Subscription terminated: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
