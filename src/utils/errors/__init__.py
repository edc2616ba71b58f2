"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AlreadyInitializedError,
    AppResolutionError,
    CanvasError,
    ConfigurationError,
    InfrastructureError,
    NetworkError,
    PartialResourceError,
)

__all__ = [
    "AlreadyInitializedError",
    "AppResolutionError",
    "CanvasError",
    "ConfigurationError",
    "InfrastructureError",
    "NetworkError",
    "PartialResourceError",
]
