"""Event bus local."""

from app.events.bus import EventBus

__all__ = ["EventBus"]
