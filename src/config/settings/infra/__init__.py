"""Settings de infraestrutura."""

from __future__ import annotations

from config.settings.infra.backplane import (
    BackplaneBackend,
    BackplaneSettings,
    get_backplane_settings,
)

__all__ = [
    "BackplaneBackend",
    "BackplaneSettings",
    "get_backplane_settings",
]
