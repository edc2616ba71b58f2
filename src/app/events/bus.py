"""Event bus local do processo.

Publicação síncrona: handlers executam na ordem de inscrição, dentro
da chamada de publish. Falhas de um handler são logadas e não impedem
os demais.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

from app.protocols.event_bus import EventBusProtocol, EventHandler

logger = logging.getLogger(__name__)


class EventBus(EventBusProtocol):
    """Barramento publish/subscribe por tópico."""

    def __init__(self) -> None:
        self._handlers: dict[str, dict[str, EventHandler]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, topic: str, handler: EventHandler) -> str:
        """Inscreve handler no tópico e retorna o handler_id."""
        if not callable(handler):
            raise ValueError("handler deve ser callable")
        handler_id = f"h{next(self._ids)}"
        self._handlers.setdefault(topic, {})[handler_id] = handler
        return handler_id

    def unsubscribe(self, topic: str, handler_id: str) -> bool:
        """Remove a inscrição; retorna False se não existia."""
        handlers = self._handlers.get(topic)
        if not handlers or handler_id not in handlers:
            return False
        del handlers[handler_id]
        if not handlers:
            del self._handlers[topic]
        return True

    def publish(self, topic: str, data: Any = None) -> int:
        """Entrega o evento aos handlers inscritos; retorna quantos rodaram.

        A lista é copiada antes da entrega: handlers podem se
        desinscrever (ou inscrever outros) durante a publicação.
        """
        handlers = list(self._handlers.get(topic, {}).items())
        for handler_id, handler in handlers:
            try:
                handler(topic, data)
            except Exception:
                logger.exception(
                    "event_handler_failed",
                    extra={"topic": topic, "handler_id": handler_id},
                )
        return len(handlers)

    def subscriber_count(self, topic: str) -> int:
        """Quantidade de handlers inscritos no tópico."""
        return len(self._handlers.get(topic, {}))
