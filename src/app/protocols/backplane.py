"""Contrato do backplane (canal de mensagens entre contextos)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

BackplaneMessage = Mapping[str, Any]
MessageHandler = Callable[[BackplaneMessage], Awaitable[None]]


class BackplaneProtocol(Protocol):
    """Canal compartilhado pela página; mensagens são dicts com "type".

    O channel id identifica o contexto no barramento e também é usado
    como pseudo session id nas requisições de identidade.
    """

    @property
    def is_initialized(self) -> bool: ...

    async def init(self, config: Mapping[str, Any] | None = None) -> None:
        """Inicializa o canal; chamadas repetidas são no-op."""
        ...

    def get_channel_id(self) -> str: ...

    def subscribe(self, handler: MessageHandler) -> str:
        """Registra handler e retorna id opaco da inscrição."""
        ...

    def unsubscribe(self, subscription_id: str) -> None: ...

    def expect_messages(self, *message_types: str) -> None:
        """Sinaliza que mensagens destes tipos são aguardadas em breve."""
        ...
