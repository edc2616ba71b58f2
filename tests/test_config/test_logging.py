"""Testes abrangentes para config.logging.

Cobre: configure_logging, get_logger, log_canvas_error,
CorrelationIdFilter, create_json_formatter.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from app.constants.canvas import ErrorCode
from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    log_canvas_error,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS
from utils.errors import ConfigurationError, PartialResourceError


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_configure_logging_default_level(self) -> None:
        """Configura logging com nível padrão INFO."""
        configure_logging()
        root = logging.getLogger()
        assert root.level == logging.INFO

    def test_configure_logging_debug_level(self) -> None:
        """Configura logging com nível DEBUG."""
        configure_logging(level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG

    def test_configure_logging_warning_level(self) -> None:
        """Configura logging com nível WARNING."""
        configure_logging(level="warning")  # case insensitive
        root = logging.getLogger()
        assert root.level == logging.WARNING

    def test_configure_logging_error_level(self) -> None:
        """Configura logging com nível ERROR."""
        configure_logging(level="ERROR")
        root = logging.getLogger()
        assert root.level == logging.ERROR

    def test_configure_logging_critical_level(self) -> None:
        """Configura logging com nível CRITICAL."""
        configure_logging(level="CRITICAL")
        root = logging.getLogger()
        assert root.level == logging.CRITICAL

    def test_configure_logging_invalid_level_raises(self) -> None:
        """Nível inválido levanta ValueError."""
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        """Configure_logging substitui handlers existentes."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1

    def test_configure_logging_with_correlation_id_getter(self) -> None:
        """Aceita correlation_id_getter customizado."""
        getter = lambda: "custom-corr-id"  # noqa: E731
        configure_logging(correlation_id_getter=getter)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        # Verifica que o filter foi adicionado
        handler = root.handlers[0]
        filters = handler.filters
        assert any(isinstance(f, CorrelationIdFilter) for f in filters)

    def test_valid_log_levels_constant(self) -> None:
        """VALID_LOG_LEVELS contém os níveis esperados."""
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS

    def test_default_service_name_constant(self) -> None:
        """DEFAULT_SERVICE_NAME está definido."""
        assert DEFAULT_SERVICE_NAME == "widget_canvas"


class TestGetLogger:
    """Testes para get_logger."""

    def test_get_logger_returns_logger(self) -> None:
        """Retorna um logger para o nome especificado."""
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        """Mesmo nome retorna mesma instância."""
        logger1 = get_logger("same.module")
        logger2 = get_logger("same.module")
        assert logger1 is logger2


class TestLogCanvasError:
    """Testes para log_canvas_error."""

    def test_fatal_error_logs_at_error_level(self) -> None:
        """Erro fatal sai em ERROR com código e tipo."""
        logger = MagicMock(spec=logging.Logger)
        error = ConfigurationError(ErrorCode.INVALID_CANVAS_CONFIG, details={"canvas_id": "home"})

        log_canvas_error(logger, error, component="Canvas", fatal=True)

        logger.log.assert_called_once()
        level, message = logger.log.call_args[0]
        assert level == logging.ERROR
        assert message == "canvas_error"
        extra = logger.log.call_args[1]["extra"]
        assert extra["component"] == "Canvas"
        assert extra["error_code"] == "invalid_canvas_config"
        assert extra["error_type"] == "ConfigurationError"
        assert extra["fatal"] is True
        assert extra["detail_canvas_id"] == "home"

    def test_descriptor_error_logs_at_warning_level(self) -> None:
        """Falha isolada de descritor sai em WARNING."""
        logger = MagicMock(spec=logging.Logger)
        error = PartialResourceError(ErrorCode.INCOMPLETE_APP_CONFIG)

        log_canvas_error(logger, error, component="Canvas", fatal=False)

        level = logger.log.call_args[0][0]
        extra = logger.log.call_args[1]["extra"]
        assert level == logging.WARNING
        assert extra["fatal"] is False
        assert extra["render_error"] is False
        assert not any(key.startswith("detail_") for key in extra)


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_from_getter(self) -> None:
        """Filter adiciona correlation_id do getter."""
        getter = lambda: "corr-123"  # noqa: E731
        filter_ = CorrelationIdFilter("my_service", getter)
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="message",
            args=(),
            exc_info=None,
        )
        result = filter_.filter(record)
        assert result is True
        assert record.correlation_id == "corr-123"
        assert record.service == "my_service"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        """Filter preserva correlation_id passado via extra."""
        getter = lambda: "from-getter"  # noqa: E731
        filter_ = CorrelationIdFilter("svc", getter)
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="msg",
            args=(),
            exc_info=None,
        )
        record.correlation_id = "explicit-id"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"

    def test_filter_uses_empty_string_when_no_getter(self) -> None:
        """Filter usa string vazia quando não há getter."""
        filter_ = CorrelationIdFilter("service_name", None)
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="msg",
            args=(),
            exc_info=None,
        )
        filter_.filter(record)
        assert record.correlation_id == ""
        assert record.service == "service_name"

    def test_filter_always_returns_true(self) -> None:
        """Filter sempre retorna True (não filtra, apenas enriquece)."""
        filter_ = CorrelationIdFilter("svc")
        record = logging.LogRecord(
            name="x",
            level=logging.ERROR,
            pathname="",
            lineno=0,
            msg="",
            args=(),
            exc_info=None,
        )
        assert filter_.filter(record) is True


class TestCreateJsonFormatter:
    """Testes para create_json_formatter e constantes."""

    def test_required_log_fields_is_ordered_tuple(self) -> None:
        """REQUIRED_LOG_FIELDS é tupla (ordem do format string)."""
        assert isinstance(REQUIRED_LOG_FIELDS, tuple)

    def test_required_log_fields_content(self) -> None:
        """REQUIRED_LOG_FIELDS contém campos obrigatórios."""
        expected = {"asctime", "levelname", "name", "message", "correlation_id", "service"}
        assert expected == set(REQUIRED_LOG_FIELDS)

    def test_field_rename_map_content(self) -> None:
        """FIELD_RENAME_MAP mapeia campos corretamente."""
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_create_json_formatter_returns_formatter(self) -> None:
        """create_json_formatter retorna JsonFormatter."""
        from pythonjsonlogger.json import JsonFormatter

        formatter = create_json_formatter()
        assert isinstance(formatter, JsonFormatter)

    def test_json_formatter_formats_record(self) -> None:
        """JsonFormatter formata record como JSON."""
        formatter = create_json_formatter()
        record = logging.LogRecord(
            name="test.logger",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        record.correlation_id = "abc-123"
        record.service = "test_service"
        output = formatter.format(record)
        assert "Test message" in output
        assert "test.logger" in output or "logger" in output
        assert "INFO" in output or "level" in output


class TestLoggingIntegration:
    """Testes de integração do sistema de logging."""

    def test_full_logging_flow(self) -> None:
        """Fluxo completo: configure, get_logger, log."""
        configure_logging(
            level="DEBUG",
            service_name="integration_test",
            correlation_id_getter=lambda: "int-test-001",
        )
        logger = get_logger("integration.test")
        # Não deve levantar exceção
        logger.debug("Debug message", extra={"custom_field": "value"})
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")

    def test_logger_with_extra_fields(self) -> None:
        """Logger aceita extra fields customizados."""
        configure_logging(level="INFO", service_name="extra_test")
        logger = get_logger("extra.fields")
        # Não deve levantar exceção
        logger.info(
            "With extras",
            extra={
                "canvas_id": "home",
                "state": "CONFIG_RESOLVED",
                "apps": 2,
            },
        )
