"""Canvas: container de múltiplos apps e seu pipeline de bootstrap."""

from app.canvas.components import ComponentRegistry
from app.canvas.container import AppSlot, Container, ContainerMessage
from app.canvas.models import AppDescriptor, CanvasData, ScriptPair
from app.canvas.pipeline import Canvas
from app.canvas.registry import AppEntry, AppRegistry

__all__ = [
    "AppDescriptor",
    "AppEntry",
    "AppRegistry",
    "AppSlot",
    "Canvas",
    "CanvasData",
    "ComponentRegistry",
    "Container",
    "ContainerMessage",
    "ScriptPair",
]
