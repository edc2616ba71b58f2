"""Contrato das instâncias de app criadas pelo canvas."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class WidgetProtocol(Protocol):
    """Instância viva de um app; destroy() deve ser idempotente."""

    def destroy(self) -> None: ...


class WidgetFactory(Protocol):
    """Classe de app registrada sob um identificador de componente."""

    def __call__(self, config: Mapping[str, Any]) -> WidgetProtocol: ...
