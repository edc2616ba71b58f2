"""Sessão do usuário compartilhada pela página.

Resolve a identidade uma única vez por ciclo (UNINITIALIZED -> WAITING ->
READY) e serve atributos via dispatcher. Chamadas concorrentes de
resolve() durante WAITING não geram nova requisição: os callbacks entram
na fila de UserSession.onInit e disparam na ordem de inscrição.

Referência de estados: fsm.states.session
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from app.constants.canvas import IDENTITY_ACK_MESSAGE, SESSION_NOT_FOUND, ErrorCode, Topic
from app.sessions.dispatch import Action, AttributeDispatcher
from app.sessions.invalidation import InvalidationListener
from app.sessions.models import (
    RESERVED_KEYS,
    RESERVED_NAMESPACE,
    first_photo,
    logged_in_accounts,
    normalize_identity_payload,
)
from config.accessor import Configuration
from config.settings.base import get_session_settings
from fsm import SessionState, create_session_fsm
from utils.errors import NetworkError

if TYPE_CHECKING:
    from app.protocols.api_client import ApiClientProtocol
    from app.protocols.backplane import BackplaneProtocol
    from app.protocols.event_bus import EventBusProtocol

logger = logging.getLogger(__name__)

ReadyCallback = Callable[["UserSession"], Any]


def _consume_exception(future: asyncio.Future[None]) -> None:
    # Falha sem aguardantes não deve gerar "exception was never retrieved"
    if not future.cancelled():
        future.exception()


class UserSession:
    """Sessão de identidade do usuário (uma por PageContext).

    Atributos:
        config: Configuração (appkey, endpoints.whoami, endpoints.logout)
        data: Payload de identidade normalizado
        identity: Primeira identidade ativa, {} sem login, None antes
            da primeira resolução
    """

    __slots__ = (
        "_api",
        "_backplane",
        "_dispatcher",
        "_events",
        "_fsm",
        "_inflight",
        "_invalidation",
        "_pending_handlers",
        "config",
        "data",
        "identity",
    )

    def __init__(
        self,
        config: Mapping[str, Any],
        *,
        api: ApiClientProtocol,
        backplane: BackplaneProtocol,
        events: EventBusProtocol,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        if defaults is None:
            defaults = get_session_settings().as_config()
        self.config = Configuration(config, defaults)
        self.data: dict[str, Any] = normalize_identity_payload({})
        self.identity: dict[str, Any] | None = None

        self._api = api
        self._backplane = backplane
        self._events = events
        self._fsm = create_session_fsm()
        self._inflight: asyncio.Future[None] | None = None
        self._pending_handlers: list[str] = []
        self._invalidation = InvalidationListener(self, backplane, events)

        self._dispatcher = AttributeDispatcher()
        self._register_handlers()

    # ──────────────────────────────────────────────────────────────────────
    # Ciclo de vida
    # ──────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._fsm.current_state

    @property
    def invalidation(self) -> InvalidationListener:
        return self._invalidation

    async def resolve(self, on_ready: ReadyCallback | None = None) -> UserSession:
        """Garante a sessão resolvida e notifica `on_ready(session)`.

        - WAITING: enfileira o callback e aguarda a resolução em curso
        - READY: chama o callback imediatamente
        - UNINITIALIZED: dispara a requisição de identidade

        Raises:
            NetworkError: Falha ao obter a identidade (para todos os aguardantes).
        """
        callback = (lambda: on_ready(self)) if on_ready is not None else None
        state = self.state

        if state is SessionState.WAITING:
            if callback is not None:
                self._pending_handlers.append(self._on_init(callback))
            await self._join_inflight()
            return self

        if state is SessionState.READY:
            if callback is not None:
                callback()
            return self

        self._invalidation.listen()
        await self._request_identity(callback)
        return self

    async def refresh(self) -> UserSession:
        """Reobtém a identidade (READY -> WAITING -> READY).

        Se já houver resolução em curso, apenas a aguarda.
        """
        if self.state is SessionState.WAITING:
            await self._join_inflight()
            return self
        await self._request_identity(None)
        return self

    async def logout(self, callback: Callable[[], Any] | None = None) -> None:
        """Encerra a sessão.

        Sem login ativo: zera o store e chama o callback sem rede.
        Com login: pede logout e aguarda o próximo onInit (via
        confirmação identity/ack no backplane) para chamar o callback.
        """
        if not self.is_("logged"):
            self._reset({})
            logger.debug("session_logout_local")
            if callback is not None:
                callback()
            return

        await self._api.request(
            self.config.get("endpoints.logout"),
            {"sessionID": self.get("sessionID")},
        )
        if callback is not None:
            self._on_init(callback)
        self._backplane.expect_messages(IDENTITY_ACK_MESSAGE)
        logger.info("session_logout_requested")

    async def _join_inflight(self) -> None:
        if self._inflight is not None:
            await asyncio.shield(self._inflight)

    async def _request_identity(self, callback: Callable[[], Any] | None) -> None:
        previous = self.state
        self._fsm.transition_or_raise(SessionState.WAITING, trigger="identity_requested")
        inflight: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        inflight.add_done_callback(_consume_exception)
        self._inflight = inflight

        endpoint = self.config.get("endpoints.whoami")
        try:
            payload = await self._api.request(
                endpoint,
                {"appkey": self.config.get("appkey"), "sessionID": self.get("sessionID")},
            )
        except asyncio.CancelledError:
            self._abort_request(previous)
            inflight.cancel()
            raise
        except Exception as exc:
            # Qualquer falha libera a resolução em curso; aguardantes recebem o erro
            cause = exc.code if isinstance(exc, NetworkError) else type(exc).__name__
            dropped = self._abort_request(previous)
            logger.warning(
                "identity_request_failed",
                extra={"endpoint": endpoint, "cause": cause, "dropped_callbacks": dropped},
            )
            error = NetworkError(
                ErrorCode.IDENTITY_REQUEST_FAILED,
                details={"endpoint": endpoint, "cause": cause},
            )
            inflight.set_exception(error)
            raise error from exc

        if not isinstance(payload, Mapping) or payload.get("result") == SESSION_NOT_FOUND:
            payload = {}

        self._fsm.transition_or_raise(SessionState.READY, trigger="identity_received")
        self._reset(payload)
        # Handlers one-shot se desinscrevem ao disparar
        self._pending_handlers.clear()
        self._events.publish(Topic.SESSION_INIT, self.data)
        logger.info(
            "session_resolved",
            extra={"logged": self.is_("logged"), "user_state": self.get("state")},
        )
        inflight.set_result(None)
        if callback is not None:
            callback()

    def _abort_request(self, previous: SessionState) -> int:
        """Volta ao estado anterior e descarta os callbacks enfileirados."""
        self._fsm.transition_or_raise(previous, trigger="identity_request_failed")
        for handler_id in self._pending_handlers:
            self._events.unsubscribe(Topic.SESSION_INIT, handler_id)
        dropped = len(self._pending_handlers)
        self._pending_handlers.clear()
        return dropped

    def _reset(self, data: Mapping[str, Any] | None) -> None:
        self.data = normalize_identity_payload(data)
        # Descarta o cache da identidade anterior
        self.identity = {}
        identities = self.get("activeIdentities")
        self.identity = identities[0] if identities else {}

    def _on_init(self, callback: Callable[[], Any]) -> str:
        """Inscreve `callback` para o próximo UserSession.onInit (uma vez)."""
        handler_id = ""

        def handler(topic: str, _data: Any) -> None:
            self._events.unsubscribe(topic, handler_id)
            callback()

        handler_id = self._events.subscribe(Topic.SESSION_INIT, handler)
        return handler_id

    # ──────────────────────────────────────────────────────────────────────
    # Atributos
    # ──────────────────────────────────────────────────────────────────────

    def get(self, key: str, default: Any = None) -> Any:
        value = self._dispatcher.dispatch(Action.GET, key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        self._dispatcher.dispatch(Action.SET, key, value)

    def is_(self, key: str) -> bool:
        return bool(self._dispatcher.dispatch(Action.IS, key))

    def has(self, key: str, value: Any) -> bool:
        return bool(self._dispatcher.dispatch(Action.HAS, key, value))

    def any(self, key: str, values: Iterable[Any]) -> bool:
        return bool(self._dispatcher.dispatch(Action.ANY, key, list(values)))

    def _attr_location(self, key: str) -> dict[str, Any]:
        if key in RESERVED_KEYS:
            return self.data[RESERVED_NAMESPACE]
        if self.identity is None:
            self.identity = {}
        return self.identity

    def _register_handlers(self) -> None:
        d = self._dispatcher
        d.register_fallback(Action.GET, self._get_stored)
        d.register_fallback(Action.SET, self._set_stored)
        d.register_fallback(Action.IS, lambda _key: False)
        d.register_fallback(Action.HAS, lambda key, value: self.any(key, [value]))
        d.register_fallback(Action.ANY, self._any_stored)

        d.register(Action.GET, "name", self._get_name)
        d.register(Action.SET, "name", self._set_name)
        d.register(Action.GET, "avatar", self._get_avatar)
        d.register(Action.GET, "sessionID", self._backplane.get_channel_id)
        d.register(Action.GET, "activeIdentities", self._get_active_identities)
        d.register(Action.IS, "logged", self._is_logged)
        d.register(Action.HAS, "identity", self._has_identity)
        d.register(Action.ANY, "role", lambda values: self.any("roles", values))
        d.register(Action.ANY, "marker", lambda values: self.any("markers", values))

    def _get_stored(self, key: str) -> Any:
        if key in RESERVED_KEYS:
            return self.data[RESERVED_NAMESPACE].get(key)
        return (self.identity or {}).get(key)

    def _set_stored(self, key: str, value: Any) -> None:
        self._attr_location(key)[key] = value

    def _any_stored(self, key: str, values: list[Any]) -> bool:
        if self.identity is None:
            return False
        stored = self.get(key, {})
        for value in values:
            if isinstance(stored, str) and stored == value:
                return True
            if isinstance(stored, list) and value in stored:
                return True
        return False

    def _get_name(self) -> str | None:
        identity = self.identity or {}
        return identity.get("displayName") or identity.get("username")

    def _set_name(self, value: str) -> None:
        self._attr_location("displayName")["displayName"] = value

    def _get_avatar(self) -> str | None:
        if not self.identity:
            return None
        if not self.identity.get("avatar"):
            self.identity["avatar"] = first_photo(self.identity)
        return self.identity["avatar"]

    def _get_active_identities(self) -> list[Mapping[str, Any]] | None:
        entry = self.data.get("poco", {}).get("entry")
        if not isinstance(entry, Mapping):
            return None
        # Cache só em registro real; o fallback {} permanece vazio
        if self.identity and "activeIdentities" in self.identity:
            return self.identity["activeIdentities"]
        active = logged_in_accounts(self.data["identities"])
        if self.identity:
            self.identity["activeIdentities"] = active
        return active

    def _is_logged(self) -> bool:
        return bool(self.get("activeIdentities"))

    def _has_identity(self, identity_url: str) -> bool:
        return any(
            isinstance(identity, Mapping) and identity.get("identityUrl") == identity_url
            for identity in self.data["identities"]
        )
