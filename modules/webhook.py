"""
webhook.py
----------
Inbound delivery endpoint for asynchronous venue notifications.

``POST /coinbase-webhook`` accepts a raw body, logs it and publishes the
bytes on the event bus topic ``coinbase_webhook``. The body is not parsed
here; subscribers decide what to do with it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from aiohttp import web

from utils.event_bus import EventBus

COINBASE_WEBHOOK_PATH = "/coinbase-webhook"
COINBASE_TOPIC = "coinbase_webhook"


class WebhookServer:
    """aiohttp application wrapper with start / serve / shutdown hooks."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8888,
        bus: Optional[EventBus] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.bus = bus or EventBus()
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._runner: Optional[web.AppRunner] = None

    @property
    def name(self) -> str:
        return "webhook"

    # -------------------------------------------------------------------- #
    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post(COINBASE_WEBHOOK_PATH, self.receive_coinbase_webhook)
        return app

    async def receive_coinbase_webhook(self, request: web.Request) -> web.Response:
        try:
            body = await request.read()
        except (OSError, asyncio.TimeoutError, web.HTTPException) as exc:
            self.logger.warning("Could not read webhook body: %s", exc)
            return web.Response(status=500, text=str(exc))

        self.logger.info("Coinbase webhook: %s", body.decode("utf-8", errors="replace"))
        self.bus.publish(COINBASE_TOPIC, body)
        return web.Response(status=200)

    # -------------------------------------------------------------------- #
    async def start(self) -> None:
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        self.logger.info("✅ Webhook listening on http://%s:%s%s", self.host, self.port, COINBASE_WEBHOOK_PATH)

    async def shutdown(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        await self.bus.close()
        self.logger.info("Webhook stopped")

    async def serve(self) -> None:
        """Run until cancelled."""
        await self.start()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.logger.info("Webhook cancelled – shutting down")
        finally:
            await self.shutdown()
