"""Factories dos colaboradores — criação de implementações concretas.

Centraliza a escolha das implementações a partir das settings de
ambiente e monta o PageContext.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.backplane import MemoryBackplane, MemoryBus, RedisBackplane
from api.connectors.http import create_json_api_client
from api.connectors.resources import create_script_loader
from app.bootstrap.clients import create_async_redis_client
from app.bootstrap.context import PageContext
from app.canvas.components import ComponentRegistry
from app.events import EventBus
from config.settings import (
    BackplaneSettings,
    BaseSettings,
    CanvasSettings,
    SessionSettings,
    get_backplane_settings,
    get_base_settings,
    get_canvas_settings,
    get_session_settings,
)

if TYPE_CHECKING:
    import httpx

    from app.protocols import BackplaneProtocol

logger = logging.getLogger(__name__)


def create_backplane(settings: BackplaneSettings | None = None) -> BackplaneProtocol:
    """Cria backplane conforme BACKPLANE_BACKEND.

    - "memory": MemoryBackplane (processo único, dev/testes)
    - "redis": RedisBackplane (pub/sub entre processos)
    """
    settings = settings or get_backplane_settings()

    if settings.backend == "redis":
        client = create_async_redis_client(settings.redis_url)
        logger.info("backplane_created", extra={"backend": "redis", "bus_name": settings.bus_name})
        return RedisBackplane(client, bus_name=settings.bus_name)

    logger.info("backplane_created", extra={"backend": "memory"})
    return MemoryBackplane(MemoryBus())


def create_page_context(
    *,
    base: BaseSettings | None = None,
    canvas: CanvasSettings | None = None,
    session: SessionSettings | None = None,
    backplane: BackplaneProtocol | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PageContext:
    """Monta um PageContext com as implementações padrão.

    Args:
        base: BaseSettings (debug). Se None, carrega do ambiente.
        canvas: CanvasSettings. Se None, carrega do ambiente.
        session: SessionSettings. Se None, carrega do ambiente.
        backplane: Backplane já criado. Se None, usa create_backplane().
        transport: Transporte httpx alternativo (MockTransport em testes).
    """
    base = base or get_base_settings()
    canvas = canvas or get_canvas_settings()
    session = session or get_session_settings()
    components = ComponentRegistry()

    return PageContext(
        events=EventBus(),
        backplane=backplane or create_backplane(),
        api=create_json_api_client(canvas, transport=transport),
        loader=create_script_loader(components, canvas, transport=transport),
        components=components,
        canvas_settings=canvas,
        session_settings=session,
        debug=base.debug,
    )
