"""Settings da sessão de usuário.

Endpoints usados na resolução de identidade e no logout.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

DEFAULT_WHOAMI_ENDPOINT = "https://api.echoenabled.com/v1/users/whoami"
DEFAULT_LOGOUT_ENDPOINT = "https://apps.echoenabled.com/v2/logout"
DEFAULT_AVATAR_URL = "https://cdn.echoenabled.com/images/avatar-default.png"


@dataclass(frozen=True)
class SessionSettings:
    """Configurações da sessão de usuário.

    Attributes:
        whoami_endpoint: Endpoint de resolução de identidade
        logout_endpoint: Endpoint de logout
        default_avatar: Avatar usado quando a identidade não define um
    """

    whoami_endpoint: str = DEFAULT_WHOAMI_ENDPOINT
    logout_endpoint: str = DEFAULT_LOGOUT_ENDPOINT
    default_avatar: str = DEFAULT_AVATAR_URL

    def validate(self) -> list[str]:
        """Valida configurações de sessão.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        for name, url in (
            ("SESSION_WHOAMI_ENDPOINT", self.whoami_endpoint),
            ("SESSION_LOGOUT_ENDPOINT", self.logout_endpoint),
        ):
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} deve ser URL http(s): {url!r}")

        return errors

    def as_config(self) -> dict[str, Any]:
        """Defaults no formato do accessor de configuração da sessão."""
        return {
            "appkey": "",
            "endpoints": {
                "whoami": self.whoami_endpoint,
                "logout": self.logout_endpoint,
            },
            "defaultAvatar": self.default_avatar,
        }


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    return SessionSettings(
        whoami_endpoint=os.getenv("SESSION_WHOAMI_ENDPOINT", DEFAULT_WHOAMI_ENDPOINT),
        logout_endpoint=os.getenv("SESSION_LOGOUT_ENDPOINT", DEFAULT_LOGOUT_ENDPOINT),
        default_avatar=os.getenv("SESSION_DEFAULT_AVATAR", DEFAULT_AVATAR_URL),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
