"""Backplanes: memória (processo único) e Redis (entre processos)."""

from api.connectors.backplane.base import BaseBackplane
from api.connectors.backplane.memory import MemoryBackplane, MemoryBus
from api.connectors.backplane.redis_backplane import RedisBackplane

__all__ = [
    "BaseBackplane",
    "MemoryBackplane",
    "MemoryBus",
    "RedisBackplane",
]
