"""Testes dos backplanes em memória e Redis."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from api.connectors.backplane import MemoryBackplane, MemoryBus, RedisBackplane

# ──────────────────────────────────────────────────────────────────────────────
# Testes: MemoryBackplane
# ──────────────────────────────────────────────────────────────────────────────


class TestMemoryBackplane:
    """Canal compartilhado via MemoryBus."""

    @pytest.mark.asyncio
    async def test_init_uses_config_channel_and_is_idempotent(self) -> None:
        backplane = MemoryBackplane(MemoryBus())

        await backplane.init({"channel_id": "c1"})
        await backplane.init({"channel_id": "c2"})

        assert backplane.is_initialized is True
        assert backplane.get_channel_id() == "c1"

    @pytest.mark.asyncio
    async def test_generated_channel_id_when_absent(self) -> None:
        backplane = MemoryBackplane(MemoryBus())

        await backplane.init()

        assert backplane.get_channel_id()

    @pytest.mark.asyncio
    async def test_messages_reach_every_context_on_channel(self) -> None:
        """Deve entregar para todos os membros do canal, inclusive o emissor."""
        bus = MemoryBus()
        first, second = MemoryBackplane(bus), MemoryBackplane(bus)
        other = MemoryBackplane(bus)
        await first.init({"channel_id": "shared"})
        await second.init({"channel_id": "shared"})
        await other.init({"channel_id": "elsewhere"})
        received: list[tuple[str, Any]] = []

        for name, backplane in (("first", first), ("second", second), ("other", other)):

            async def handler(message, name=name) -> None:
                received.append((name, message["type"]))

            backplane.subscribe(handler)

        delivered = await first.publish({"type": "identity/ack"})

        assert delivered == 2
        assert received == [("first", "identity/ack"), ("second", "identity/ack")]

    @pytest.mark.asyncio
    async def test_unsubscribe_and_close(self) -> None:
        bus = MemoryBus()
        backplane = MemoryBackplane(bus)
        await backplane.init({"channel_id": "c"})
        handler = AsyncMock()
        subscription_id = backplane.subscribe(handler)

        backplane.unsubscribe(subscription_id)
        await backplane.publish({"type": "x"})
        handler.assert_not_awaited()

        await backplane.close()
        assert backplane.is_initialized is False
        assert await bus.publish("c", {"type": "x"}) == 0

    @pytest.mark.asyncio
    async def test_expected_messages_are_cleared_on_delivery(self) -> None:
        backplane = MemoryBackplane(MemoryBus())
        await backplane.init({"channel_id": "c"})

        backplane.expect_messages("identity/ack")
        assert backplane.expected_messages == {"identity/ack"}

        await backplane.publish({"type": "identity/ack"})
        assert backplane.expected_messages == frozenset()

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self) -> None:
        backplane = MemoryBackplane(MemoryBus())
        await backplane.init({"channel_id": "c"})
        backplane.subscribe(AsyncMock(side_effect=RuntimeError("boom")))
        healthy = AsyncMock()
        backplane.subscribe(healthy)

        await backplane.publish({"type": "x"})

        healthy.assert_awaited_once_with({"type": "x"})


# ──────────────────────────────────────────────────────────────────────────────
# Testes: RedisBackplane
# ──────────────────────────────────────────────────────────────────────────────


class _FakePubSub:
    """PubSub com fila controlada pelo teste."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.subscribed: list[str] = []
        self.unsubscribed: list[str] = []
        self.closed = False

    async def subscribe(self, channel: str) -> None:
        self.subscribed.append(channel)

    async def unsubscribe(self, channel: str) -> None:
        self.unsubscribed.append(channel)

    async def aclose(self) -> None:
        self.closed = True

    async def listen(self):
        while True:
            yield await self.queue.get()


class TestRedisBackplane:
    """Backplane sobre Redis Pub/Sub (cliente mockado)."""

    @pytest.mark.asyncio
    async def test_init_subscribes_prefixed_channel(self) -> None:
        pubsub = _FakePubSub()
        redis = MagicMock()
        redis.pubsub.return_value = pubsub
        backplane = RedisBackplane(redis, bus_name="canvas")

        await backplane.init({"channel_id": "c1"})
        await backplane.init({"channel_id": "c2"})

        assert pubsub.subscribed == ["canvas:c1"]
        assert backplane.channel_key == "canvas:c1"
        await backplane.close()

    @pytest.mark.asyncio
    async def test_publish_serializes_json(self) -> None:
        redis = MagicMock()
        redis.pubsub.return_value = _FakePubSub()
        redis.publish = AsyncMock(return_value=3)
        backplane = RedisBackplane(redis)
        await backplane.init({"channel_id": "c"})

        delivered = await backplane.publish({"type": "identity/ack"})

        assert delivered == 3
        channel, payload = redis.publish.await_args.args
        assert channel == "widget-canvas:c"
        assert json.loads(payload) == {"type": "identity/ack"}
        await backplane.close()

    @pytest.mark.asyncio
    async def test_incoming_messages_are_delivered(self) -> None:
        """Deve ignorar eventos que não são mensagens e JSON inválido."""
        pubsub = _FakePubSub()
        redis = MagicMock()
        redis.pubsub.return_value = pubsub
        backplane = RedisBackplane(redis)
        await backplane.init({"channel_id": "c"})
        received: list[dict[str, Any]] = []
        done = asyncio.Event()

        async def handler(message: dict[str, Any]) -> None:
            received.append(message)
            done.set()

        backplane.subscribe(handler)
        await pubsub.queue.put({"type": "subscribe", "data": 1})
        await pubsub.queue.put({"type": "message", "data": "not-json"})
        await pubsub.queue.put({"type": "message", "data": json.dumps({"type": "identity/ack"})})
        await asyncio.wait_for(done.wait(), timeout=1)

        assert received == [{"type": "identity/ack"}]
        await backplane.close()

    @pytest.mark.asyncio
    async def test_close_releases_pubsub(self) -> None:
        pubsub = _FakePubSub()
        redis = MagicMock()
        redis.pubsub.return_value = pubsub
        backplane = RedisBackplane(redis)
        await backplane.init({"channel_id": "c"})

        await backplane.close()

        assert pubsub.unsubscribed == ["widget-canvas:c"]
        assert pubsub.closed is True
        assert backplane.is_initialized is False
