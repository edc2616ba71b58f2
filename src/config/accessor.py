"""Accessor de configuração por caminho de chaves.

Encapsula um dict aninhado com leitura/escrita por caminho pontuado
("endpoints.whoami") e defaults mesclados por baixo do valor informado.

Uso:
    config = Configuration({"appkey": "k"}, defaults={"endpoints": {...}})
    config.get("endpoints.whoami")
    config.set("user", session)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_MISSING = object()


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Mescla recursivamente `override` sobre `base` (override vence).

    Dicts são copiados em todos os níveis; demais valores (listas,
    objetos) são mantidos por referência. Nenhuma entrada é mutada.

    Args:
        base: Mapeamento de origem.
        override: Valores que prevalecem em conflitos.

    Returns:
        Novo dict mesclado.
    """
    merged: dict[str, Any] = {
        key: deep_merge(value, {}) if isinstance(value, Mapping) else value
        for key, value in base.items()
    }
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge(value, {})
        else:
            merged[key] = value
    return merged


class Configuration:
    """Configuração aninhada com acesso por caminho pontuado."""

    __slots__ = ("_data",)

    def __init__(
        self,
        master: Mapping[str, Any] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._data = deep_merge(defaults or {}, master or {})

    def get(self, key: str, default: Any = None) -> Any:
        """Lê valor por caminho; retorna `default` se algum nível não existir."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def set(self, key: str, value: Any) -> None:
        """Define valor por caminho, criando níveis intermediários."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def remove(self, key: str) -> None:
        """Remove a chave (no-op se ausente)."""
        parts = key.split(".")
        parent = self.get(".".join(parts[:-1])) if len(parts) > 1 else self._data
        if isinstance(parent, dict):
            parent.pop(parts[-1], None)

    def extend(self, values: Mapping[str, Any]) -> None:
        """Mescla `values` sobre a configuração atual."""
        self._data = deep_merge(self._data, values)

    def to_dict(self) -> dict[str, Any]:
        """Cópia estrutural da configuração."""
        return deep_merge(self._data, {})

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING
