"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_page_context

    # Na inicialização do processo
    initialize_app()

    # Contexto compartilhado pelos canvases
    context = get_page_context()
    await Canvas(container, context, {"id": "home", "appkey": "k"}).bootstrap()
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.bootstrap.context import PageContext
from app.bootstrap.dependencies import create_backplane, create_page_context
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_backplane_settings,
    get_base_settings,
    get_canvas_settings,
    get_session_settings,
)

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do processo.
    """
    base = get_base_settings()
    configure_logging(
        level=(base.log_level or DEFAULT_LOG_LEVEL).upper(),
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (logging DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"session: {error}" for error in get_session_settings().validate())
    errors.extend(f"canvas: {error}" for error in get_canvas_settings().validate())
    errors.extend(f"backplane: {error}" for error in get_backplane_settings().validate(base))

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


@lru_cache(maxsize=1)
def get_page_context() -> PageContext:
    """Obtém o PageContext do processo (singleton)."""
    return create_page_context()


__all__ = [
    "PageContext",
    "create_backplane",
    "create_page_context",
    "get_page_context",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
