from __future__ import annotations

import logging

import httpx

from .types import NotificationTarget

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramNotifier:
    """Best-effort delivery to the Telegram Bot API.

    Each message gets exactly one request. Failures are logged and reported
    through the return value of ``send``; they are never raised or retried.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        api_base: str = TELEGRAM_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def send(self, target: NotificationTarget, text: str) -> bool:
        if not target.is_configured or not text:
            return False

        logger.info("Sending Telegram message chat_id=%s", target.chat_id)
        try:
            response = await self._client.post(
                f"{self.api_base}/bot{target.bot_id}/sendMessage",
                data={
                    "chat_id": target.chat_id,
                    "parse_mode": "html",
                    "text": text,
                },
            )
        except httpx.HTTPError as exc:
            logger.warning("Telegram send failed chat_id=%s: %r", target.chat_id, exc)
            return False

        logger.debug("Telegram response status=%d body=%s", response.status_code, response.text)
        if not response.is_success:
            logger.warning(
                "Telegram send rejected chat_id=%s status=%d body=%s",
                target.chat_id,
                response.status_code,
                response.text,
            )
            return False
        return True
