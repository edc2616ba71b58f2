"""Settings do canvas.

Storage de configuração dos canvases e parâmetros de transporte.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_STORAGE_URL = "https://cdn.echoenabled.com/canvases/"


def normalize_storage_url(url: str) -> str:
    """Garante esquema http(s) e barra final na URL do storage."""
    if url.startswith("//"):
        url = f"https:{url}"
    elif not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url if url.endswith("/") else f"{url}/"


@dataclass(frozen=True)
class CanvasSettings:
    """Configurações do canvas.

    Attributes:
        storage_url: URL base do storage de configuração (id é concatenado)
        request_timeout_seconds: Timeout por requisição HTTP
        max_retries: Tentativas extras de transporte (0 = sem retry)
        script_timeout_seconds: Timeout de download de cada script
        allow_remote_scripts: Permite bundles por URL http(s) (exigem hash)
    """

    storage_url: str = DEFAULT_STORAGE_URL
    request_timeout_seconds: float = 10.0
    max_retries: int = 0
    script_timeout_seconds: float = 30.0
    allow_remote_scripts: bool = False

    def validate(self) -> list[str]:
        """Valida configurações do canvas.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.storage_url:
            errors.append("CANVAS_STORAGE_URL não pode ser vazio")

        if self.request_timeout_seconds <= 0:
            errors.append("CANVAS_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("CANVAS_MAX_RETRIES deve ser >= 0")

        if self.script_timeout_seconds <= 0:
            errors.append("CANVAS_SCRIPT_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_canvas_from_env() -> CanvasSettings:
    """Carrega CanvasSettings de variáveis de ambiente."""
    return CanvasSettings(
        storage_url=normalize_storage_url(
            os.getenv("CANVAS_STORAGE_URL", DEFAULT_STORAGE_URL)
        ),
        request_timeout_seconds=float(os.getenv("CANVAS_REQUEST_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("CANVAS_MAX_RETRIES", "0")),
        script_timeout_seconds=float(os.getenv("CANVAS_SCRIPT_TIMEOUT_SECONDS", "30")),
        allow_remote_scripts=(
            os.getenv("CANVAS_ALLOW_REMOTE_SCRIPTS", "").lower() in ("true", "1", "yes")
        ),
    )


@lru_cache(maxsize=1)
def get_canvas_settings() -> CanvasSettings:
    """Retorna instância cacheada de CanvasSettings."""
    return _load_canvas_from_env()
