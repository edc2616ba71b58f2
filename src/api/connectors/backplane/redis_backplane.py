"""Backplane sobre Redis Pub/Sub — contextos em processos distintos.

Canal Redis: "<bus_name>:<channel_id>". Mensagens trafegam como JSON.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from api.connectors.backplane.base import BaseBackplane
from app.protocols.backplane import BackplaneMessage

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)


class RedisBackplane(BaseBackplane):
    """Backplane entre processos usando Redis Pub/Sub.

    Args:
        redis_client: Cliente Redis assíncrono (decode_responses=True)
        bus_name: Prefixo do canal Redis
        channel_id: Channel id fixo (senão vem da config ou é gerado)
    """

    def __init__(
        self,
        redis_client: AsyncRedis,
        bus_name: str = "widget-canvas",
        channel_id: str | None = None,
    ) -> None:
        super().__init__(channel_id)
        self._redis = redis_client
        self._bus_name = bus_name
        self._pubsub: PubSub | None = None
        self._reader: asyncio.Task[None] | None = None

    @property
    def channel_key(self) -> str:
        return f"{self._bus_name}:{self._channel_id}"

    async def init(self, config: Mapping[str, Any] | None = None) -> None:
        if self._initialized:
            return
        config = config or {}
        self._bus_name = str(config.get("bus_name") or self._bus_name)
        self._channel_id = self._resolve_channel_id(config)
        self._pubsub = self._redis.pubsub()
        await self._pubsub.subscribe(self.channel_key)
        self._reader = asyncio.create_task(self._listen(self._pubsub))
        self._initialized = True
        logger.info("backplane_initialized", extra={"backend": "redis", "channel": self.channel_key})

    async def _listen(self, pubsub: PubSub) -> None:
        try:
            async for raw in pubsub.listen():
                if raw.get("type") != "message":
                    continue
                try:
                    message = json.loads(raw["data"])
                except (TypeError, ValueError):
                    logger.warning("backplane_invalid_message", extra={"channel": self.channel_key})
                    continue
                if isinstance(message, dict):
                    await self.deliver(message)
        except RedisError:
            logger.exception("backplane_reader_failed", extra={"channel": self.channel_key})
            self._initialized = False

    async def publish(self, message: BackplaneMessage) -> int:
        """Publica no canal Redis; retorna a contagem de receptores."""
        return await self._redis.publish(self.channel_key, json.dumps(dict(message)))

    async def close(self) -> None:
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self.channel_key)
            await self._pubsub.aclose()
            self._pubsub = None
        self._initialized = False
        logger.info("backplane_closed", extra={"backend": "redis", "channel": self.channel_key})
