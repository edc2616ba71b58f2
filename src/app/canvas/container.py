"""Container hospedeiro do canvas.

Equivalente ao elemento alvo: atributos de dados ("canvas-id",
"canvas-appkey"), o marcador de inicialização, os slots de render de
cada app e as mensagens exibidas ao usuário.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.constants.canvas import CANVAS_INITIALIZED_MARKER


@dataclass(slots=True)
class AppSlot:
    """Área de render de um app (cabeçalho + corpo)."""

    app_id: str
    caption: str | None = None
    header_visible: bool = False
    body: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ContainerMessage:
    text: str
    type: str = "error"


class Container:
    """Alvo onde o canvas renderiza seus apps."""

    __slots__ = ("attributes", "data", "messages", "slots")

    def __init__(self, attributes: Mapping[str, Any] | None = None) -> None:
        self.attributes: dict[str, Any] = dict(attributes or {})
        self.data: dict[str, Any] = {}
        self.slots: list[AppSlot] = []
        self.messages: list[ContainerMessage] = []

    def attr(self, name: str) -> Any:
        return self.attributes.get(name)

    @property
    def is_initialized(self) -> bool:
        return bool(self.data.get(CANVAS_INITIALIZED_MARKER))

    def mark_initialized(self) -> None:
        self.data[CANVAS_INITIALIZED_MARKER] = True

    def clear_initialized(self) -> None:
        self.data[CANVAS_INITIALIZED_MARKER] = False

    def add_slot(self, app_id: str, caption: str | None = None) -> AppSlot:
        """Cria o slot do app; o cabeçalho só aparece se houver caption."""
        slot = AppSlot(app_id=app_id, caption=caption, header_visible=bool(caption))
        self.slots.append(slot)
        return slot

    def remove_slot(self, slot: AppSlot) -> None:
        if slot in self.slots:
            self.slots.remove(slot)

    def clear_slots(self) -> None:
        self.slots.clear()

    def show_message(self, text: str, message_type: str = "error") -> None:
        self.messages.append(ContainerMessage(text=text, type=message_type))
