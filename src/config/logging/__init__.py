"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="widget_canvas")
    logger = get_logger(__name__)
    logger.info("session_resolved", extra={"logged": True})

Campos obrigatórios em todo log: correlation_id, service, level,
logger, message, asctime.
"""

from config.logging.config import configure_logging, get_logger, log_canvas_error
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_canvas_error",
]
