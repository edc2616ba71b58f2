"""Base comum dos backplanes: channel id e registro de handlers."""

from __future__ import annotations

import itertools
import logging
import uuid
from collections.abc import Mapping
from typing import Any

from app.protocols.backplane import BackplaneMessage, BackplaneProtocol, MessageHandler

logger = logging.getLogger(__name__)


class BaseBackplane(BackplaneProtocol):
    """Mantém inscrições locais e entrega mensagens em ordem de inscrição."""

    def __init__(self, channel_id: str | None = None) -> None:
        self._channel_id = channel_id or ""
        self._handlers: dict[str, MessageHandler] = {}
        self._ids = itertools.count(1)
        self._initialized = False
        self._expected: set[str] = set()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def expected_messages(self) -> frozenset[str]:
        """Tipos de mensagem aguardados e ainda não recebidos."""
        return frozenset(self._expected)

    def _resolve_channel_id(self, config: Mapping[str, Any]) -> str:
        return str(config.get("channel_id") or self._channel_id or uuid.uuid4().hex)

    def get_channel_id(self) -> str:
        return self._channel_id

    def subscribe(self, handler: MessageHandler) -> str:
        subscription_id = f"bp{next(self._ids)}"
        self._handlers[subscription_id] = handler
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> None:
        self._handlers.pop(subscription_id, None)

    def expect_messages(self, *message_types: str) -> None:
        self._expected.update(message_types)
        logger.debug(
            "backplane_expecting_messages",
            extra={"channel_id": self._channel_id, "message_types": sorted(message_types)},
        )

    async def deliver(self, message: BackplaneMessage) -> None:
        """Entrega uma mensagem recebida a todos os handlers locais."""
        message_type = message.get("type")
        if isinstance(message_type, str):
            self._expected.discard(message_type)
        for subscription_id, handler in list(self._handlers.items()):
            try:
                await handler(message)
            except Exception:
                logger.exception(
                    "backplane_handler_failed",
                    extra={"subscription_id": subscription_id, "message_type": message_type},
                )
