"""Registro de classes de app por identificador de componente.

Bundles carregados pelo ScriptLoader expõem `register(components)`
e definem suas classes aqui; o canvas resolve o componente de cada
descritor neste registro.
"""

from __future__ import annotations

import logging

from app.protocols.widget import WidgetFactory

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """Mapa nome do componente -> classe/factory do app."""

    def __init__(self) -> None:
        self._components: dict[str, WidgetFactory] = {}

    def define(self, name: str, factory: WidgetFactory) -> None:
        """Registra (ou substitui) a implementação de um componente."""
        if not name:
            raise ValueError("nome do componente não pode ser vazio")
        if name in self._components:
            logger.info("component_redefined", extra={"component": name})
        self._components[name] = factory

    def get(self, name: str) -> WidgetFactory | None:
        return self._components.get(name)

    def is_defined(self, name: str) -> bool:
        return name in self._components

    def names(self) -> list[str]:
        return list(self._components)
