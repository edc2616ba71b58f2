"""Constantes de domínio do canvas e da sessão de usuário."""

from __future__ import annotations

from enum import StrEnum


class Topic(StrEnum):
    """Tópicos publicados no event bus local."""

    SESSION_INIT = "UserSession.onInit"
    SESSION_INVALIDATE = "UserSession.onInvalidate"
    CANVAS_ERROR = "Canvas.onError"
    CANVAS_READY = "Canvas.onReady"


class ErrorCode(StrEnum):
    """Códigos estáveis de erro do canvas."""

    CANVAS_ALREADY_INITIALIZED = "canvas_already_initialized"
    INVALID_CANVAS_CONFIG = "invalid_canvas_config"
    INVALID_CONFIG = "invalid_config"
    UNABLE_TO_RETRIEVE_APP_CONFIG = "unable_to_retrieve_app_config"
    INCOMPLETE_APP_CONFIG = "incomplete_app_config"
    UNABLE_TO_LOAD_APP_SCRIPT = "unable_to_load_app_script"
    NO_SUITABLE_APP_CLASS = "no_suitable_app_class"
    APP_INIT_FAILED = "app_init_failed"
    IDENTITY_REQUEST_FAILED = "identity_request_failed"
    REQUEST_FAILED = "request_failed"
    BACKPLANE_INIT_FAILED = "backplane_init_failed"
    CANVAS_BOOTSTRAP_FAILED = "canvas_bootstrap_failed"
    # Códigos distintos do backend: não unificar
    WRONG_QUERY = "wrong_query"
    INCORRECT_APPKEY = "incorrect_appkey"


# Mensagem de backplane que sinaliza mudança de identidade em outro contexto
IDENTITY_ACK_MESSAGE = "identity/ack"

# Sentinela do endpoint whoami para "usuário não logado"
SESSION_NOT_FOUND = "session_not_found"

# Chave do marcador de inicialização no container
CANVAS_INITIALIZED_MARKER = "canvas-initialized"

LABELS: dict[str, str] = {
    "error_no_apps": "No applications defined for this canvas",
    "error_no_config": "Unable to retrieve Canvas config",
    ErrorCode.NO_SUITABLE_APP_CLASS: "Unable to init an app, no suitable class found",
    ErrorCode.UNABLE_TO_RETRIEVE_APP_CONFIG: "Unable to retrieve Canvas config from the storage",
    ErrorCode.INCOMPLETE_APP_CONFIG: "Unable to init an app, config is incomplete",
    ErrorCode.UNABLE_TO_LOAD_APP_SCRIPT: "Unable to load the app script",
    ErrorCode.APP_INIT_FAILED: "Unable to init an app, constructor failed",
    ErrorCode.CANVAS_ALREADY_INITIALIZED: "Canvas has been initialized already",
    ErrorCode.INVALID_CANVAS_CONFIG: "Canvas with invalid configuration found",
    ErrorCode.INVALID_CONFIG: "Unable to retrieve Canvas config",
    ErrorCode.IDENTITY_REQUEST_FAILED: "Unable to retrieve user identity",
    ErrorCode.REQUEST_FAILED: "Request to the remote endpoint failed",
    ErrorCode.BACKPLANE_INIT_FAILED: "Unable to establish the messaging channel",
    ErrorCode.CANVAS_BOOTSTRAP_FAILED: "Unable to initialize the canvas",
    ErrorCode.WRONG_QUERY: "Query is malformed or not supported",
    ErrorCode.INCORRECT_APPKEY: "Application key is incorrect",
}


def label_for(code: str) -> str:
    """Retorna a mensagem associada ao código (ou o próprio código)."""
    return LABELS.get(code, LABELS.get(f"error_{code}", code))
