"""Contexto da página: colaboradores compartilhados por todos os canvases.

Substitui o estado global da página: barramento de eventos, backplane,
cliente de API, loader de scripts, registro de componentes e a sessão
de usuário (criada uma única vez).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.sessions import UserSession
from config.settings import CanvasSettings, SessionSettings

if TYPE_CHECKING:
    from app.canvas.components import ComponentRegistry
    from app.protocols import (
        ApiClientProtocol,
        BackplaneProtocol,
        EventBusProtocol,
        ResourceLoaderProtocol,
    )

logger = logging.getLogger(__name__)


@dataclass
class PageContext:
    """Colaboradores de uma página (processo).

    Attributes:
        events: Barramento de eventos local
        backplane: Canal de mensagens entre contextos
        api: Cliente JSON (whoami, logout, storage)
        loader: Loader dos bundles dos apps
        components: Registro de classes de app
        canvas_settings: Storage e timeouts do canvas
        session_settings: Endpoints padrão da sessão
        debug: Seleciona scripts "dev" dos apps
    """

    events: EventBusProtocol
    backplane: BackplaneProtocol
    api: ApiClientProtocol
    loader: ResourceLoaderProtocol
    components: ComponentRegistry
    canvas_settings: CanvasSettings = field(default_factory=CanvasSettings)
    session_settings: SessionSettings = field(default_factory=SessionSettings)
    debug: bool = False
    _session: UserSession | None = field(default=None, init=False, repr=False)

    @property
    def session(self) -> UserSession | None:
        return self._session

    def user_session(self, appkey: str, **config: Any) -> UserSession | None:
        """Retorna a sessão da página, criando-a na primeira chamada.

        Sem appkey não há sessão (None). Chamadas seguintes retornam a
        mesma instância, independente do appkey informado.
        """
        if not appkey:
            return None
        if self._session is None:
            self._session = UserSession(
                {**config, "appkey": appkey},
                api=self.api,
                backplane=self.backplane,
                events=self.events,
                defaults=self.session_settings.as_config(),
            )
            logger.info("user_session_created")
        return self._session
