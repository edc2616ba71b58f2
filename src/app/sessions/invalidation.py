"""Listener de invalidação entre contextos.

Quando outro contexto (aba, janela) altera o login, o backplane entrega
uma mensagem "identity/ack". O listener reobtém a identidade e publica
UserSession.onInvalidate com os dados atualizados.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.constants.canvas import IDENTITY_ACK_MESSAGE, Topic
from utils.errors import NetworkError

if TYPE_CHECKING:
    from app.protocols.backplane import BackplaneMessage, BackplaneProtocol
    from app.protocols.event_bus import EventBusProtocol
    from app.sessions.user_session import UserSession

logger = logging.getLogger(__name__)


class InvalidationListener:
    """Assinatura única do backplane por sessão."""

    __slots__ = ("_backplane", "_events", "_session", "_subscription_id")

    def __init__(
        self,
        session: UserSession,
        backplane: BackplaneProtocol,
        events: EventBusProtocol,
    ) -> None:
        self._session = session
        self._backplane = backplane
        self._events = events
        self._subscription_id: str | None = None

    @property
    def subscription_id(self) -> str | None:
        return self._subscription_id

    @property
    def is_listening(self) -> bool:
        return self._subscription_id is not None

    def listen(self) -> None:
        """Inscreve no backplane (no-op se já inscrito)."""
        if self._subscription_id is not None:
            return
        self._subscription_id = self._backplane.subscribe(self._on_message)
        logger.debug("invalidation_listener_started", extra={"subscription_id": self._subscription_id})

    def stop(self) -> None:
        if self._subscription_id is None:
            return
        self._backplane.unsubscribe(self._subscription_id)
        self._subscription_id = None

    async def _on_message(self, message: BackplaneMessage) -> None:
        if message.get("type") != IDENTITY_ACK_MESSAGE:
            return
        try:
            await self._session.refresh()
        except NetworkError as exc:
            logger.warning("session_invalidation_refresh_failed", extra={"error_code": exc.code})
            return
        self._events.publish(Topic.SESSION_INVALIDATE, self._session.data)
        logger.info("session_invalidated", extra={"logged": self._session.is_("logged")})
