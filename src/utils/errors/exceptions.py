"""Exceções de domínio do bootstrap de canvas e sessão.

Taxonomia:
    - ConfigurationError: appkey, id do canvas ou descritor inválido
    - AlreadyInitializedError: bootstrap duplicado no mesmo container
    - NetworkError: falha de transporte/storage em qualquer requisição
    - AppResolutionError: nenhuma classe registrada para o componente
    - PartialResourceError: descritor inválido ou script não carregado
"""

from __future__ import annotations

from typing import Any


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class CanvasError(Exception):
    """Base das falhas reportadas pelo canvas.

    Attributes:
        code: Código estável do erro (ex: "invalid_canvas_config")
        message: Mensagem legível (label do código se não informada)
        render_error: Se a mensagem deve ser exibida no container
        details: Dados adicionais para log/evento (sem PII)
    """

    def __init__(
        self,
        code: str,
        message: str | None = None,
        *,
        render_error: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        from app.constants.canvas import label_for

        self.code = code
        self.message = message or label_for(code)
        self.render_error = render_error
        self.details = details or {}
        super().__init__(self.message)

    def to_event(self) -> dict[str, Any]:
        """Payload publicado no evento de erro."""
        return {
            "code": self.code,
            "message": self.message,
            "type": type(self).__name__,
            "render_error": self.render_error,
            "details": self.details,
        }


class ConfigurationError(CanvasError):
    """Configuração ausente ou inválida (appkey, id, descritor)."""


class AlreadyInitializedError(CanvasError):
    """Container já inicializado por outro canvas."""


class NetworkError(CanvasError, InfrastructureError):
    """Falha de transporte ou storage."""


class AppResolutionError(CanvasError):
    """Nenhuma implementação registrada para o componente."""


class PartialResourceError(CanvasError):
    """Descritor isolado falhou; os demais seguem normalmente."""
