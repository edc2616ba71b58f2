"""Carregador de scripts (bundles) dos apps.

Um script é um caminho de módulo importável ("pkg.widgets.stream") ou,
se habilitado em CANVAS_ALLOW_REMOTE_SCRIPTS, uma URL http(s) cujo
código é baixado e executado como módulo novo. Scripts remotos exigem
hash fixado ("sha256:<hex>") e são recusados se o conteúdo divergir.
Depois de carregado, se o módulo expõe `register(components)`, ele é
chamado com o ComponentRegistry da página.

Downloads rodam em paralelo; cada URL é carregada uma única vez por
loader (chamadas concorrentes aguardam a mesma task).
"""

from __future__ import annotations

import asyncio
import hashlib
import importlib
import logging
import sys
import types
from collections.abc import Sequence
from typing import TYPE_CHECKING

from api.connectors.http.base import HttpClient, HttpClientConfig
from app.protocols.resource_loader import Resource, ResourceLoaderProtocol

if TYPE_CHECKING:
    import httpx

    from app.canvas.components import ComponentRegistry
    from config.settings import CanvasSettings

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://")
INTEGRITY_ALGORITHM = "sha256"


class ScriptRejectedError(Exception):
    """Script remoto recusado (desabilitado, sem hash ou hash divergente)."""


def script_digest(content: bytes) -> str:
    """Hash no formato aceito em `Resource.integrity`."""
    return f"{INTEGRITY_ALGORITHM}:{hashlib.sha256(content).hexdigest()}"


def bundle_module_name(url: str) -> str:
    """Nome determinístico do módulo criado para uma URL remota."""
    digest = hashlib.sha1(url.encode(), usedforsecurity=False).hexdigest()[:12]
    return f"widget_bundle_{digest}"


class ScriptLoader(ResourceLoaderProtocol):
    """Implementação de ResourceLoaderProtocol sobre httpx/importlib.

    Args:
        components: Registro passado a `register()` dos bundles
        http: Cliente HTTP para scripts remotos
        allow_remote: Habilita scripts por URL (exigem hash fixado)
    """

    def __init__(
        self,
        components: ComponentRegistry,
        http: HttpClient | None = None,
        *,
        allow_remote: bool = False,
    ) -> None:
        self._components = components
        self._http = http or HttpClient()
        self._allow_remote = allow_remote
        self._loads: dict[str, asyncio.Task[None]] = {}

    async def download(self, resources: Sequence[Resource]) -> list[Resource]:
        """Carrega os scripts pendentes e retorna os recursos que falharam.

        Recursos cujo predicado já é verdadeiro não são baixados.
        """
        pending = [resource for resource in resources if not resource.loaded()]
        pins: dict[str, str | None] = {}
        for resource in pending:
            pins.setdefault(resource.url, resource.integrity)
        urls = list(pins)
        outcomes = await asyncio.gather(
            *(self._ensure_loaded(url, pins[url]) for url in urls),
            return_exceptions=True,
        )

        broken: set[str] = set()
        for url, outcome in zip(urls, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                broken.add(url)
                logger.warning(
                    "script_load_failed",
                    extra={"url": url, "error_type": type(outcome).__name__, "error": str(outcome)},
                )

        failed = [r for r in pending if r.url in broken or not r.loaded()]
        logger.info(
            "scripts_downloaded",
            extra={"requested": len(resources), "fetched": len(urls), "failed": len(failed)},
        )
        return failed

    def _ensure_loaded(self, url: str, integrity: str | None) -> asyncio.Task[None]:
        task = self._loads.get(url)
        if task is None or (task.done() and (task.cancelled() or task.exception() is not None)):
            task = asyncio.ensure_future(self._load(url, integrity))
            self._loads[url] = task
        return task

    async def _load(self, url: str, integrity: str | None) -> None:
        if url.startswith(REMOTE_PREFIXES):
            module = await self._load_remote(url, integrity)
        else:
            module = importlib.import_module(url)

        register = getattr(module, "register", None)
        if callable(register):
            register(self._components)
        logger.debug("script_loaded", extra={"url": url, "module_name": module.__name__})

    async def _load_remote(self, url: str, integrity: str | None) -> types.ModuleType:
        if not self._allow_remote:
            raise ScriptRejectedError(f"scripts remotos desabilitados: {url}")
        if not integrity:
            raise ScriptRejectedError(f"script remoto sem hash fixado: {url}")

        response = await self._http.get(url)
        digest = script_digest(response.content)
        if digest != integrity.strip().lower():
            logger.warning("script_integrity_mismatch", extra={"url": url, "digest": digest})
            raise ScriptRejectedError(f"hash divergente para {url}")

        name = bundle_module_name(url)
        module = types.ModuleType(name)
        module.__file__ = url
        exec(compile(response.text, url, "exec"), module.__dict__)  # noqa: S102
        sys.modules[name] = module
        return module


def create_script_loader(
    components: ComponentRegistry,
    settings: CanvasSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ScriptLoader:
    """Factory do loader com timeout e política de scripts remotos das settings."""
    from config.settings import get_canvas_settings

    canvas = settings or get_canvas_settings()
    config = HttpClientConfig(
        timeout_seconds=canvas.script_timeout_seconds,
        max_retries=canvas.max_retries,
    )
    return ScriptLoader(
        components,
        HttpClient(config, transport=transport),
        allow_remote=canvas.allow_remote_scripts,
    )
