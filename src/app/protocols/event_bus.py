"""Contrato do event bus local (publish/subscribe por tópico)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

EventHandler = Callable[[str, Any], None]


class EventBusProtocol(Protocol):
    """Barramento síncrono de eventos do processo."""

    def subscribe(self, topic: str, handler: EventHandler) -> str: ...

    def unsubscribe(self, topic: str, handler_id: str) -> bool: ...

    def publish(self, topic: str, data: Any = None) -> int: ...
