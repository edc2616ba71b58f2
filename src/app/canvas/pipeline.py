"""Pipeline de bootstrap do canvas.

Estágios (cada um avança o estado do canvas):
    1. Configuração: dados manuais ou GET {storage_url}{id}
    2. Backplane: inicializa o canal de mensagens
    3. Sessão: resolve a sessão do usuário (se houver appkey)
    4. Recursos: baixa em paralelo os bundles dos apps válidos
    5. Apps: instancia cada app em seu slot, na ordem original

Falhas fatais interrompem o pipeline (estado ERROR) e são levantadas
por bootstrap(). Falhas de um descritor são reportadas e o descritor é
ignorado; os demais apps seguem normalmente.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from functools import partial
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.canvas.models import AppDescriptor, CanvasData
from app.canvas.registry import AppRegistry
from app.constants.canvas import ErrorCode, Topic, label_for
from app.observability import reset_correlation_id, set_correlation_id
from app.protocols.resource_loader import Resource
from config.accessor import Configuration, deep_merge
from config.logging import log_canvas_error
from fsm import CanvasState, create_canvas_fsm
from utils.errors import (
    AlreadyInitializedError,
    AppResolutionError,
    CanvasError,
    ConfigurationError,
    NetworkError,
    PartialResourceError,
)

if TYPE_CHECKING:
    from app.bootstrap.context import PageContext
    from app.canvas.container import Container

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG: dict[str, Any] = {
    "id": "",
    "appkey": "",
    "data": {},
    "overrides": {},
    "user": None,
}

# Atributos do container que sobrescrevem a config ("canvas-id" -> "id")
_CONTAINER_OVERRIDES = ("id", "appkey")


class Canvas:
    """Orquestra a inicialização de vários apps dentro de um container.

    Uso:
        canvas = Canvas(container, context, {"id": "home", "appkey": "k"})
        await canvas.bootstrap()
        ...
        canvas.destroy()
    """

    def __init__(
        self,
        container: Container,
        context: PageContext,
        config: Mapping[str, Any] | None = None,
        *,
        debug: bool | None = None,
    ) -> None:
        self.container = container
        self.config = Configuration(config, _DEFAULT_CONFIG)
        self.apps = AppRegistry()
        self.data: CanvasData | None = None
        self.errors: list[CanvasError] = []

        self._context = context
        self._debug = context.debug if debug is None else debug
        self._fsm = create_canvas_fsm(self.id)
        self._owns_marker = False
        self._ready: list[tuple[int, AppDescriptor]] = []

    @property
    def id(self) -> str:
        return str(self.config.get("id") or "")

    @property
    def state(self) -> CanvasState:
        return self._fsm.current_state

    @property
    def _canvas_data(self) -> CanvasData:
        if self.data is None:
            raise ConfigurationError(ErrorCode.INVALID_CONFIG, render_error=True)
        return self.data

    @property
    def is_manually_configured(self) -> bool:
        return bool(self.config.get("data"))

    async def bootstrap(self) -> Canvas:
        """Executa o pipeline completo.

        Raises:
            CanvasError: Falha fatal (já reportada e, se for o caso, exibida).
        """
        try:
            self._check_not_initialized()
            self._apply_container_overrides()
            self._validate_config()
        except CanvasError as error:
            self._fail(error)
            raise

        self.container.mark_initialized()
        self._owns_marker = True
        token = set_correlation_id(self.id or None)
        try:
            for stage in (
                self._resolve_config,
                self._init_backplane,
                self._resolve_session,
                self._load_resources,
                self._instantiate_apps,
            ):
                await stage()
        except CanvasError as error:
            self._fail(error)
            raise
        except Exception as exc:
            error = CanvasError(
                ErrorCode.CANVAS_BOOTSTRAP_FAILED,
                details={"cause": type(exc).__name__, "state": str(self.state)},
            )
            self._fail(error)
            raise error from exc
        finally:
            reset_correlation_id(token)

        logger.info(
            "canvas_ready",
            extra={"canvas_id": self.id, "apps": len(self.apps), "errors": len(self.errors)},
        )
        self._context.events.publish(
            Topic.CANVAS_READY,
            {"canvas_id": self.id, "apps": self.apps.ids()},
        )
        return self

    def destroy(self) -> None:
        """Destrói os apps e libera o container para nova inicialização."""
        self.apps.destroy_all()
        self.container.clear_slots()
        if self._owns_marker:
            self.container.clear_initialized()
            self._owns_marker = False
        self._fsm = create_canvas_fsm(self.id)
        self._ready = []
        logger.debug("canvas_destroyed", extra={"canvas_id": self.id})

    # ──────────────────────────────────────────────────────────────────────
    # Pré-condições
    # ──────────────────────────────────────────────────────────────────────

    def _check_not_initialized(self) -> None:
        if self.container.is_initialized:
            raise AlreadyInitializedError(ErrorCode.CANVAS_ALREADY_INITIALIZED)

    def _apply_container_overrides(self) -> None:
        for key in _CONTAINER_OVERRIDES:
            value = self.container.attr(f"canvas-{key}")
            if value is not None:
                self.config.set(key, value)

    def _validate_config(self) -> None:
        if self.is_manually_configured:
            return
        if not (self.config.get("id") and self.config.get("appkey")):
            raise ConfigurationError(
                ErrorCode.INVALID_CANVAS_CONFIG,
                details={"has_id": bool(self.config.get("id"))},
            )

    # ──────────────────────────────────────────────────────────────────────
    # Estágios
    # ──────────────────────────────────────────────────────────────────────

    async def _resolve_config(self) -> None:
        if self.is_manually_configured:
            raw = self.config.get("data")
        else:
            raw = await self._fetch_config()

        data = _parse_canvas_data(raw)
        if data is None or not data.apps:
            raise ConfigurationError(
                ErrorCode.INVALID_CONFIG,
                label_for("error_no_apps" if data is not None else "error_no_config"),
                render_error=True,
                details={"canvas_id": self.id},
            )
        self.data = data
        self._advance(CanvasState.CONFIG_RESOLVED)

    async def _fetch_config(self) -> Any:
        url = f"{self._context.canvas_settings.storage_url}{self.id}"
        try:
            return await self._context.api.request(url, {})
        except NetworkError as exc:
            raise NetworkError(
                ErrorCode.UNABLE_TO_RETRIEVE_APP_CONFIG,
                render_error=True,
                details={"canvas_id": self.id, "cause": exc.code},
            ) from exc

    async def _init_backplane(self) -> None:
        try:
            await self._context.backplane.init(self._canvas_data.backplane)
        except CanvasError:
            raise
        except Exception as exc:
            raise NetworkError(
                ErrorCode.BACKPLANE_INIT_FAILED,
                details={"cause": type(exc).__name__},
            ) from exc
        self._advance(CanvasState.MESSAGING_READY)

    async def _resolve_session(self) -> None:
        appkey = self.config.get("appkey")
        if self.config.get("user") is None and appkey:
            session = self._context.user_session(appkey)
            if session is not None:
                await session.resolve()
                self.config.set("user", session)
        self._advance(CanvasState.SESSION_READY)

    async def _load_resources(self) -> None:
        data = self._canvas_data
        manual = self.is_manually_configured
        components = self._context.components
        candidates: list[tuple[int, AppDescriptor, Resource]] = []

        for index, app in enumerate(data.apps):
            script = app.resolve_script(self._debug)
            if not app.component or not script or not (manual or app.id):
                self._report(
                    PartialResourceError(
                        ErrorCode.INCOMPLETE_APP_CONFIG,
                        details={"index": index, "component": app.component},
                    )
                )
                continue
            resource = Resource(
                url=script,
                loaded=partial(components.is_defined, app.component),
                integrity=app.integrity.get(script),
            )
            candidates.append((index, app, resource))

        failed: list[Resource] = []
        if candidates:
            failed = await self._context.loader.download([item[2] for item in candidates])
        failed_ids = {id(resource) for resource in failed}

        self._ready = []
        for index, app, resource in candidates:
            if id(resource) in failed_ids:
                self._report(
                    PartialResourceError(
                        ErrorCode.UNABLE_TO_LOAD_APP_SCRIPT,
                        details={"index": index, "component": app.component, "script": resource.url},
                    )
                )
                continue
            self._ready.append((index, app))
        self._advance(CanvasState.RESOURCES_LOADED)

    async def _instantiate_apps(self) -> None:
        user = self.config.get("user")
        overrides = self.config.get("overrides") or {}

        for index, app in self._ready:
            factory = self._context.components.get(app.component or "")
            if factory is None:
                self._report(
                    AppResolutionError(
                        ErrorCode.NO_SUITABLE_APP_CLASS,
                        details={"index": index, "component": app.component},
                    )
                )
                continue

            app_id = app.id or str(index)
            slot = self.container.add_slot(app_id, app.caption)
            config = copy.deepcopy(app.config)
            config.update(user=user, target=slot, canvasId=self.id)
            app_overrides = overrides.get(app_id)
            if isinstance(app_overrides, Mapping):
                config = deep_merge(config, app_overrides)

            try:
                instance = factory(config)
            except Exception as exc:
                self.container.remove_slot(slot)
                self._report(
                    PartialResourceError(
                        ErrorCode.APP_INIT_FAILED,
                        details={"app_id": app_id, "component": app.component, "reason": str(exc)},
                    )
                )
                continue
            self.apps.add(app_id, instance)
        self._advance(CanvasState.APPS_INSTANTIATED)

    # ──────────────────────────────────────────────────────────────────────
    # Estado e erros
    # ──────────────────────────────────────────────────────────────────────

    def _advance(self, target: CanvasState) -> None:
        self._fsm.transition_or_raise(target, trigger=f"stage_{target.lower()}")
        logger.debug("canvas_stage_completed", extra={"canvas_id": self.id, "state": str(target)})

    def _report(self, error: CanvasError, *, fatal: bool = False) -> None:
        self.errors.append(error)
        log_canvas_error(logger, error, component="Canvas", fatal=fatal)
        self._context.events.publish(Topic.CANVAS_ERROR, {**error.to_event(), "canvas_id": self.id})
        if error.render_error:
            self.container.show_message(error.message, "error")

    def _fail(self, error: CanvasError) -> None:
        self._report(error, fatal=True)
        if not self._fsm.is_terminal:
            self._fsm.transition(CanvasState.ERROR, trigger=error.code)
        logger.info(
            "canvas_failed",
            extra={
                **self._fsm.get_state_summary(),
                "canvas_id": self.id,
                "history": self._fsm.get_history_summary(),
            },
        )


def _parse_canvas_data(raw: Any) -> CanvasData | None:
    """Valida o documento; vazio ou inválido retorna None."""
    if not isinstance(raw, Mapping) or not raw:
        return None
    try:
        return CanvasData.model_validate(raw)
    except ValidationError as exc:
        logger.warning("canvas_config_invalid", extra={"errors": exc.error_count()})
        return None
