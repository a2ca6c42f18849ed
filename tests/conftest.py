import asyncio
from types import SimpleNamespace
from typing import List, Optional

import pytest


class FakeSubscription:
    """Subscription whose message stream is fed from the test."""

    def __init__(self, subject: str) -> None:
        self.subject = subject
        self._queue: asyncio.Queue = asyncio.Queue()

    def deliver(self, subject: str, data: bytes) -> None:
        self._queue.put_nowait(SimpleNamespace(subject=subject, data=data))

    @property
    def messages(self):
        return self._iterate()

    async def _iterate(self):
        while True:
            yield await self._queue.get()


class FakeNatsClient:
    """In-memory stand-in for nats.aio.client.Client.

    - Records subscriptions so tests can push messages into them
    - flush() can be made to fail to emulate a rejected subscription
    """

    def __init__(self, fail_flush: Optional[Exception] = None) -> None:
        self.fail_flush = fail_flush
        self.subscriptions: List[FakeSubscription] = []
        self.is_closed = False
        self.drained = False
        self.last_error = None
        self.subscribed = asyncio.Event()

    async def subscribe(self, subject: str) -> FakeSubscription:
        sub = FakeSubscription(subject)
        self.subscriptions.append(sub)
        return sub

    async def flush(self) -> None:
        if self.fail_flush is not None:
            raise self.fail_flush
        self.subscribed.set()

    async def drain(self) -> None:
        self.drained = True
        self.is_closed = True

    async def close(self) -> None:
        self.is_closed = True


@pytest.fixture
def fake_nats(monkeypatch):
    """Patch nats.connect to hand out a single FakeNatsClient."""
    client = FakeNatsClient()
    calls = []

    async def fake_connect(**kwargs):
        calls.append(kwargs)
        return client

    monkeypatch.setattr("nats_tail.subscriber.nats.connect", fake_connect)
    client.connect_calls = calls
    return client
