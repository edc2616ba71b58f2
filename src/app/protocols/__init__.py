"""Protocolos e contratos do core da aplicação."""

from .api_client import ApiClientProtocol
from .backplane import BackplaneMessage, BackplaneProtocol, MessageHandler
from .event_bus import EventBusProtocol, EventHandler
from .resource_loader import Resource, ResourceLoaderProtocol
from .widget import WidgetFactory, WidgetProtocol

__all__ = [
    "ApiClientProtocol",
    "BackplaneMessage",
    "BackplaneProtocol",
    "EventBusProtocol",
    "EventHandler",
    "MessageHandler",
    "Resource",
    "ResourceLoaderProtocol",
    "WidgetFactory",
    "WidgetProtocol",
]
