"""Settings do backplane.

Canal de mensagens entre contextos (abas/processos) usado para
propagar invalidações de identidade.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

BackplaneBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class BackplaneSettings:
    """Configurações do backplane.

    Attributes:
        backend: memory (processo único) ou redis (entre processos)
        redis_url: URL de conexão Redis (obrigatória com backend=redis)
        bus_name: Nome do barramento (prefixo dos canais)
    """

    backend: BackplaneBackend = "memory"
    redis_url: str = ""
    bus_name: str = "widget-canvas"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do backplane.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"BACKPLANE_BACKEND inválido: {self.backend}")

        if self.backend == "redis" and not self.redis_url:
            errors.append("REDIS_URL obrigatório com BACKPLANE_BACKEND=redis")

        if self.backend == "memory" and base.is_production:
            errors.append("BACKPLANE_BACKEND=memory proibido em production")

        if not self.bus_name:
            errors.append("BACKPLANE_BUS_NAME não pode ser vazio")

        return errors


def _load_backplane_from_env() -> BackplaneSettings:
    """Carrega BackplaneSettings de variáveis de ambiente."""
    backend_str = os.getenv("BACKPLANE_BACKEND", "memory").lower()
    backend: BackplaneBackend = "redis" if backend_str == "redis" else "memory"
    return BackplaneSettings(
        backend=backend,
        redis_url=os.getenv("REDIS_URL", ""),
        bus_name=os.getenv("BACKPLANE_BUS_NAME", "widget-canvas"),
    )


@lru_cache(maxsize=1)
def get_backplane_settings() -> BackplaneSettings:
    """Retorna instância cacheada de BackplaneSettings."""
    return _load_backplane_from_env()
