"""Configuração centralizada de logging.

Logging estruturado JSON com campos obrigatórios (correlation_id,
service, level, logger, message). O correlation_id do bootstrap de
um canvas é o próprio id do canvas.

Uso:
    from config.logging import configure_logging, get_logger

    # No composition root (app/bootstrap/)
    configure_logging(level="INFO", service_name="widget_canvas")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("canvas_stage_completed", extra={"stage": "CONFIG_RESOLVED"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

    from utils.errors import CanvasError

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Nome padrão do serviço
DEFAULT_SERVICE_NAME = "widget_canvas"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o processo.

    Deve ser chamada uma vez, no composition root.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função opcional que retorna o correlation_id
            do contexto atual (ex: de ContextVar).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado.

    O filter injeta automaticamente service e correlation_id.
    """
    return logging.getLogger(name)


def log_canvas_error(
    logger: logging.Logger,
    error: CanvasError,
    *,
    component: str,
    fatal: bool,
) -> None:
    """Log estruturado de um erro do canvas (sem PII).

    Erros fatais saem em ERROR; falhas isoladas de descritor em WARNING.

    Args:
        logger: Logger instance.
        error: Erro reportado.
        component: Componente que reportou (ex: "Canvas").
        fatal: Se o erro interrompeu o pipeline.
    """
    extra: dict[str, object] = {
        "component": component,
        "error_code": error.code,
        "error_type": type(error).__name__,
        "fatal": fatal,
        "render_error": error.render_error,
    }
    extra.update({f"detail_{key}": value for key, value in error.details.items()})

    logger.log(
        logging.ERROR if fatal else logging.WARNING,
        "canvas_error",
        extra=extra,
    )
