"""Agregador de settings do widget-canvas.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    SessionSettings,
    get_base_settings,
    get_session_settings,
)

# Canvas settings
from config.settings.canvas import (
    CanvasSettings,
    get_canvas_settings,
    normalize_storage_url,
)

# Infrastructure settings
from config.settings.infra import (
    BackplaneBackend,
    BackplaneSettings,
    get_backplane_settings,
)

__all__ = [
    "BackplaneBackend",
    "BackplaneSettings",
    # Base
    "BaseSettings",
    # Canvas
    "CanvasSettings",
    "Environment",
    "SessionSettings",
    "get_backplane_settings",
    "get_base_settings",
    "get_canvas_settings",
    "get_session_settings",
    "normalize_storage_url",
]
