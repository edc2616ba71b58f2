"""Registro ordenado das instâncias de app de um canvas."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.protocols.widget import WidgetProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppEntry:
    app_id: str
    instance: WidgetProtocol


class AppRegistry:
    """Lista (app_id, instância) na ordem de criação."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[AppEntry] = []

    def add(self, app_id: str, instance: WidgetProtocol) -> None:
        self._entries.append(AppEntry(app_id=app_id, instance=instance))

    def get(self, app_id: str) -> WidgetProtocol | None:
        for entry in self._entries:
            if entry.app_id == app_id:
                return entry.instance
        return None

    def ids(self) -> list[str]:
        return [entry.app_id for entry in self._entries]

    def __iter__(self) -> Iterator[AppEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def destroy(self, app: WidgetProtocol | None) -> None:
        """Destrói uma instância (no-op para valor vazio)."""
        if not app:
            return
        app.destroy()
        self._entries = [entry for entry in self._entries if entry.instance is not app]

    def destroy_all(self) -> None:
        """Destrói todas as instâncias, na ordem, e esvazia o registro."""
        entries, self._entries = self._entries, []
        for entry in entries:
            try:
                entry.instance.destroy()
            except Exception:
                logger.exception("app_destroy_failed", extra={"app_id": entry.app_id})
