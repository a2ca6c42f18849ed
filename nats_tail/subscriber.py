#!/usr/bin/env python3
"""
NATS Tail Subscriber.
Connects to NATS, subscribes to one subject pattern and feeds every
matching message through the display engine until asked to stop.
"""
import asyncio
import logging
import ssl
from typing import List, Optional
from urllib.parse import urlparse

import nats

from .display import Engine
from .errors import ConnectError, SubscribeError
from .stats import get_current_time_ms

logger = logging.getLogger(__name__)

DEFAULT_URL = "nats://localhost:4222"
CLIENT_NAME = "nats-tail"
MAX_RECONNECT_ATTEMPTS = 5
RECONNECT_TIME_WAIT = 1.0


def parse_servers(urls: str) -> List[str]:
    """Split a comma separated list of server URLs."""
    return [url.strip() for url in urls.split(',') if url.strip()]


def tls_context_for(servers: List[str]) -> Optional[ssl.SSLContext]:
    """Return a client TLS context if any server uses the tls:// scheme."""
    if any(urlparse(server).scheme == 'tls' for server in servers):
        return ssl.create_default_context()
    return None


class Tail:
    """Single-subject NATS subscription rendered through an Engine."""

    def __init__(self, servers: List[str], subject: str, engine: Engine):
        self.servers = servers
        self.subject = subject
        self.engine = engine
        self.nc = None
        self.sub = None
        self.last_error: Optional[Exception] = None

    async def _error_cb(self, e):
        self.last_error = e
        logger.warning(f"NATS error: {e}")

    async def _disconnected_cb(self):
        logger.warning("NATS disconnected")

    async def _reconnected_cb(self):
        logger.warning("NATS reconnected")

    async def connect(self):
        try:
            self.nc = await nats.connect(
                servers=self.servers,
                name=CLIENT_NAME,
                tls=tls_context_for(self.servers),
                error_cb=self._error_cb,
                disconnected_cb=self._disconnected_cb,
                reconnected_cb=self._reconnected_cb,
                max_reconnect_attempts=MAX_RECONNECT_ATTEMPTS,
                reconnect_time_wait=RECONNECT_TIME_WAIT,
            )
        except Exception as e:
            raise ConnectError(f"Can't connect: {e}") from e
        # errors from failed connect attempts are no longer relevant
        self.last_error = None
        logger.debug(f"Connected to {', '.join(self.servers)}")

    async def subscribe(self):
        """Subscribe and round-trip to the server to surface setup errors."""
        try:
            self.sub = await self.nc.subscribe(self.subject)
            await self.nc.flush()
        except Exception as e:
            raise SubscribeError(f"Can't subscribe to [{self.subject}]: {e}") from e

        if self.last_error is not None:
            raise SubscribeError(str(self.last_error))

        logger.info(f"Listening on [{self.subject}]")

    async def consume(self):
        """Render messages one at a time, in delivery order."""
        async for msg in self.sub.messages:
            self.engine.render(msg.subject, msg.data)

    async def close(self):
        if self.nc is None or self.nc.is_closed:
            return
        try:
            await self.nc.drain()
        except Exception as e:
            logger.debug(f"Drain failed, closing: {e}")
            await self.nc.close()

    async def run(self, stop_event: asyncio.Event):
        """Tail until stop_event is set or the consumer fails."""
        start_time = get_current_time_ms()
        await self.connect()
        try:
            await self.subscribe()

            consumer = asyncio.create_task(self.consume())
            stopper = asyncio.create_task(stop_event.wait())
            done, pending = await asyncio.wait(
                [consumer, stopper],
                return_when=asyncio.FIRST_COMPLETED
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            if consumer in done:
                # Re-raise whatever stopped the consumer
                consumer.result()
        finally:
            await self.close()
            self.engine.stats.set_duration(start_time, get_current_time_ms())
            logger.info(self.engine.stats.summary())
