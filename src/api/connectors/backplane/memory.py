"""Backplane em memória — contextos do mesmo processo.

Contextos que compartilham o mesmo MemoryBus e o mesmo channel id
recebem as mesmas mensagens (equivalente a abas do mesmo navegador).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from api.connectors.backplane.base import BaseBackplane
from app.protocols.backplane import BackplaneMessage

logger = logging.getLogger(__name__)


class MemoryBus:
    """Barramento compartilhado: channel id -> backplanes inscritos."""

    def __init__(self) -> None:
        self._channels: dict[str, list[MemoryBackplane]] = {}

    def join(self, channel_id: str, backplane: MemoryBackplane) -> None:
        members = self._channels.setdefault(channel_id, [])
        if backplane not in members:
            members.append(backplane)

    def leave(self, channel_id: str, backplane: MemoryBackplane) -> None:
        members = self._channels.get(channel_id, [])
        if backplane in members:
            members.remove(backplane)

    async def publish(self, channel_id: str, message: BackplaneMessage) -> int:
        members = list(self._channels.get(channel_id, []))
        for member in members:
            await member.deliver(message)
        return len(members)


class MemoryBackplane(BaseBackplane):
    """Backplane de processo único (dev/test)."""

    def __init__(self, bus: MemoryBus | None = None, channel_id: str | None = None) -> None:
        super().__init__(channel_id)
        self._bus = bus or MemoryBus()

    async def init(self, config: Mapping[str, Any] | None = None) -> None:
        if self._initialized:
            return
        self._channel_id = self._resolve_channel_id(config or {})
        self._bus.join(self._channel_id, self)
        self._initialized = True
        logger.info("backplane_initialized", extra={"backend": "memory", "channel_id": self._channel_id})

    async def publish(self, message: BackplaneMessage) -> int:
        """Publica no canal; todos os membros (inclusive este) recebem."""
        return await self._bus.publish(self._channel_id, message)

    async def close(self) -> None:
        self._bus.leave(self._channel_id, self)
        self._initialized = False
