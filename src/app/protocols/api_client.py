"""Contrato do cliente de requisições JSON.

Usado pela sessão (whoami/logout) e pelo canvas (storage de config).
Evita dependência direta da camada api.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class ApiClientProtocol(Protocol):
    """Contrato mínimo para requisições GET com resposta JSON.

    Implementações levantam utils.errors.NetworkError em falha de
    transporte, status de erro ou corpo não-JSON.
    """

    async def request(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any: ...
