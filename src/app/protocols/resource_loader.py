"""Contrato do carregador de scripts (bundles) dos apps."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Resource:
    """Script a carregar.

    Attributes:
        url: URL http(s) ou caminho de módulo importável
        loaded: Predicado que confirma que o símbolo definido pelo
            script está disponível
        integrity: Hash fixado do conteúdo ("sha256:<hex>"), exigido
            para scripts remotos
    """

    url: str
    loaded: Callable[[], bool]
    integrity: str | None = None


class ResourceLoaderProtocol(Protocol):
    """Baixa scripts em paralelo e aguarda todos concluírem."""

    async def download(self, resources: Sequence[Resource]) -> list[Resource]:
        """Carrega os recursos; retorna os que falharam (vazio = todos ok)."""
        ...
