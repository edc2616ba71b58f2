"""Testes para o pipeline de bootstrap do Canvas.

Testa:
    - Guarda de inicialização dupla
    - Validação de id/appkey e atributos do container
    - Falhas fatais (storage, config vazia) e isoladas (descritores)
    - Injeção de config, overrides e seleção de script dev/prod
    - destroy() e reinicialização
"""

from __future__ import annotations

import pytest

from app.canvas import Canvas, Container
from app.constants.canvas import ErrorCode, Topic
from fsm import CanvasState
from tests.fakes.fake_page import (
    STORAGE_URL,
    WHOAMI_URL,
    ExplodingWidget,
    FakeWidget,
    make_page_context,
)
from utils.errors import (
    AlreadyInitializedError,
    AppResolutionError,
    CanvasError,
    ConfigurationError,
    NetworkError,
    PartialResourceError,
)

# ──────────────────────────────────────────────────────────────────────────────
# Fixtures
# ──────────────────────────────────────────────────────────────────────────────

CANVAS_DOC = {
    "backplane": {"channel_id": "canvas-channel"},
    "apps": [
        {
            "id": "stream",
            "component": "Widgets.Stream",
            "script": "https://cdn.test/stream.js",
            "caption": "Stream",
            "config": {"query": "childrenof:x", "display": {"limit": 10}},
        },
        {
            "id": "counter",
            "component": "Widgets.Counter",
            "script": "https://cdn.test/counter.js",
        },
    ],
    "unknown_field": "ignored",
}

BUNDLES = {
    "https://cdn.test/stream.js": {"Widgets.Stream": FakeWidget},
    "https://cdn.test/counter.js": {"Widgets.Counter": FakeWidget},
}


def _context(doc=CANVAS_DOC, bundles=BUNDLES, **kwargs):
    return make_page_context(
        {f"{STORAGE_URL}home": doc, WHOAMI_URL: {}},
        bundles,
        **kwargs,
    )


def _errors(context) -> list[dict]:
    published: list[dict] = []
    context.events.subscribe(Topic.CANVAS_ERROR, lambda _t, data: published.append(data))
    return published


# ──────────────────────────────────────────────────────────────────────────────
# Testes: Fluxo completo
# ──────────────────────────────────────────────────────────────────────────────


class TestBootstrapHappyPath:
    """Pipeline completo até APPS_INSTANTIATED."""

    @pytest.mark.asyncio
    async def test_bootstrap_instantiates_apps_in_order(self) -> None:
        context = _context()
        container = Container()
        ready: list[dict] = []
        context.events.subscribe(Topic.CANVAS_READY, lambda _t, data: ready.append(data))
        canvas = Canvas(container, context, {"id": "home", "appkey": "appkey-1"})

        await canvas.bootstrap()

        assert canvas.state is CanvasState.APPS_INSTANTIATED
        assert [entry.app_id for entry in canvas.apps] == ["stream", "counter"]
        assert ready == [{"canvas_id": "home", "apps": ["stream", "counter"]}]
        assert container.is_initialized is True
        assert context.backplane.get_channel_id() == "canvas-channel"
        assert context.loader.downloads == [
            ["https://cdn.test/stream.js", "https://cdn.test/counter.js"],
        ]
        assert canvas.errors == []

    @pytest.mark.asyncio
    async def test_app_config_injection(self) -> None:
        context = _context()
        container = Container()
        canvas = Canvas(container, context, {"id": "home", "appkey": "appkey-1"})

        await canvas.bootstrap()

        stream = canvas.apps.get("stream")
        assert stream.config["user"] is context.session
        assert stream.config["canvasId"] == "home"
        assert stream.config["target"] is container.slots[0]
        assert stream.config["query"] == "childrenof:x"
        # Config do descritor é copiada, não compartilhada
        assert "user" not in canvas.data.apps[0].config

    @pytest.mark.asyncio
    async def test_slot_header_visible_only_with_caption(self) -> None:
        context = _context()
        container = Container()

        await Canvas(container, context, {"id": "home", "appkey": "appkey-1"}).bootstrap()

        assert [(slot.app_id, slot.header_visible) for slot in container.slots] == [
            ("stream", True),
            ("counter", False),
        ]

    @pytest.mark.asyncio
    async def test_overrides_are_deep_merged(self) -> None:
        context = _context()
        canvas = Canvas(
            Container(),
            context,
            {
                "id": "home",
                "appkey": "appkey-1",
                "overrides": {"stream": {"display": {"limit": 25}, "theme": "dark"}},
            },
        )

        await canvas.bootstrap()

        config = canvas.apps.get("stream").config
        assert config["display"] == {"limit": 25}
        assert config["theme"] == "dark"
        assert config["query"] == "childrenof:x"
        assert "theme" not in canvas.apps.get("counter").config

    @pytest.mark.asyncio
    async def test_container_attributes_override_config(self) -> None:
        context = _context()
        container = Container({"canvas-id": "home", "canvas-appkey": "appkey-attr"})
        canvas = Canvas(container, context, {"id": "other", "appkey": "appkey-1"})

        await canvas.bootstrap()

        assert canvas.id == "home"
        assert context.api.calls_to(WHOAMI_URL)[0]["appkey"] == "appkey-attr"

    @pytest.mark.asyncio
    async def test_supplied_session_skips_identity_request(self) -> None:
        context = _context()
        user = object()
        canvas = Canvas(Container(), context, {"id": "home", "appkey": "appkey-1", "user": user})

        await canvas.bootstrap()

        assert context.api.calls_to(WHOAMI_URL) == []
        assert canvas.apps.get("counter").config["user"] is user

    @pytest.mark.asyncio
    async def test_manual_data_skips_storage_and_allows_positional_ids(self) -> None:
        context = _context()
        data = {
            "apps": [
                {"component": "Widgets.Counter", "script": "https://cdn.test/counter.js"},
            ],
        }
        canvas = Canvas(Container(), context, {"data": data})

        await canvas.bootstrap()

        assert context.api.calls == []
        assert canvas.apps.ids() == ["0"]
        assert canvas.apps.get("0").config["user"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("debug", "expected"), [(True, "dev"), (False, "prod")])
    async def test_script_pair_selected_by_debug_flag(self, debug: bool, expected: str) -> None:
        scripts = {
            "dev": "https://cdn.test/stream.dev.js",
            "prod": "https://cdn.test/stream.min.js",
        }
        doc = {
            "apps": [
                {
                    "id": "stream",
                    "component": "Widgets.Stream",
                    "script": "https://cdn.test/stream.js",
                    "scripts": scripts,
                },
            ],
        }
        bundles = {url: {"Widgets.Stream": FakeWidget} for url in scripts.values()}
        context = _context(doc, bundles, debug=debug)

        await Canvas(Container(), context, {"id": "home", "appkey": "k"}).bootstrap()

        assert context.loader.downloads == [[scripts[expected]]]

    @pytest.mark.asyncio
    async def test_incomplete_script_pair_uses_script(self) -> None:
        doc = {
            "apps": [
                {
                    "id": "stream",
                    "component": "Widgets.Stream",
                    "script": "https://cdn.test/stream.js",
                    "scripts": {"dev": "https://cdn.test/stream.dev.js"},
                },
            ],
        }
        context = _context(doc, debug=True)

        await Canvas(Container(), context, {"id": "home", "appkey": "k"}).bootstrap()

        assert context.loader.downloads == [["https://cdn.test/stream.js"]]

    @pytest.mark.asyncio
    async def test_descriptor_pin_is_passed_to_loader(self) -> None:
        pin = "sha256:" + "ab" * 32
        doc = {
            "apps": [
                {
                    "id": "stream",
                    "component": "Widgets.Stream",
                    "script": "https://cdn.test/stream.js",
                    "integrity": {"https://cdn.test/stream.js": pin},
                },
                {
                    "id": "counter",
                    "component": "Widgets.Counter",
                    "script": "https://cdn.test/counter.js",
                },
            ],
        }
        context = _context(doc)

        await Canvas(Container(), context, {"id": "home", "appkey": "k"}).bootstrap()

        assert context.loader.pins == {
            "https://cdn.test/stream.js": pin,
            "https://cdn.test/counter.js": None,
        }


# ──────────────────────────────────────────────────────────────────────────────
# Testes: Falhas fatais
# ──────────────────────────────────────────────────────────────────────────────


class TestFatalErrors:
    """Falhas que interrompem o pipeline."""

    @pytest.mark.asyncio
    async def test_double_initialization_is_rejected_without_requests(self) -> None:
        context = _context()
        container = Container()
        await Canvas(container, context, {"id": "home", "appkey": "k"}).bootstrap()
        calls_before = len(context.api.calls)
        published = _errors(context)

        second = Canvas(container, context, {"id": "home", "appkey": "k"})
        with pytest.raises(AlreadyInitializedError) as exc_info:
            await second.bootstrap()

        assert exc_info.value.code == ErrorCode.CANVAS_ALREADY_INITIALIZED
        assert len(context.api.calls) == calls_before
        assert second.state is CanvasState.ERROR
        assert [event["code"] for event in published] == ["canvas_already_initialized"]
        assert container.messages == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("config", [{"id": "home"}, {"appkey": "k"}, {}])
    async def test_missing_id_or_appkey(self, config: dict) -> None:
        context = _context()
        container = Container()

        with pytest.raises(ConfigurationError) as exc_info:
            await Canvas(container, context, config).bootstrap()

        assert exc_info.value.code == ErrorCode.INVALID_CANVAS_CONFIG
        assert context.api.calls == []
        assert container.is_initialized is False

    @pytest.mark.asyncio
    async def test_storage_failure_is_rendered(self) -> None:
        context = make_page_context({})
        container = Container()
        canvas = Canvas(container, context, {"id": "home", "appkey": "k"})

        with pytest.raises(NetworkError) as exc_info:
            await canvas.bootstrap()

        assert exc_info.value.code == ErrorCode.UNABLE_TO_RETRIEVE_APP_CONFIG
        assert canvas.state is CanvasState.ERROR
        assert [m.text for m in container.messages] == [exc_info.value.message]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("doc", "label"),
        [
            ({}, "Unable to retrieve Canvas config"),
            ({"apps": []}, "No applications defined for this canvas"),
            ({"backplane": {}}, "No applications defined for this canvas"),
            ({"apps": "not-a-list"}, "Unable to retrieve Canvas config"),
        ],
    )
    async def test_empty_config_or_no_apps(self, doc: dict, label: str) -> None:
        context = _context(doc)
        container = Container()
        published = _errors(context)

        with pytest.raises(ConfigurationError) as exc_info:
            await Canvas(container, context, {"id": "home", "appkey": "k"}).bootstrap()

        assert exc_info.value.code == ErrorCode.INVALID_CONFIG
        assert exc_info.value.message == label
        assert [m.text for m in container.messages] == [label]
        assert len(published) == 1
        assert published[0]["render_error"] is True
        assert context.loader.downloads == []

    @pytest.mark.asyncio
    async def test_identity_failure_stops_pipeline(self) -> None:
        context = _context()
        context.api.responses[WHOAMI_URL] = NetworkError(ErrorCode.REQUEST_FAILED)
        canvas = Canvas(Container(), context, {"id": "home", "appkey": "k"})

        with pytest.raises(NetworkError) as exc_info:
            await canvas.bootstrap()

        assert exc_info.value.code == ErrorCode.IDENTITY_REQUEST_FAILED
        assert canvas.state is CanvasState.ERROR
        assert context.loader.downloads == []

    @pytest.mark.asyncio
    async def test_backplane_failure_is_reported(self, monkeypatch) -> None:
        context = _context()
        published = _errors(context)

        async def refuse(config=None) -> None:
            raise ConnectionError("refused")

        monkeypatch.setattr(context.backplane, "init", refuse)
        canvas = Canvas(Container(), context, {"id": "home", "appkey": "k"})

        with pytest.raises(NetworkError) as exc_info:
            await canvas.bootstrap()

        assert exc_info.value.code == ErrorCode.BACKPLANE_INIT_FAILED
        assert exc_info.value.details["cause"] == "ConnectionError"
        assert canvas.state is CanvasState.ERROR
        assert [event["code"] for event in published] == ["backplane_init_failed"]
        assert context.api.calls_to(WHOAMI_URL) == []

    @pytest.mark.asyncio
    async def test_unexpected_session_failure_is_reported(self, monkeypatch) -> None:
        context = _context()
        published = _errors(context)

        class BrokenSession:
            async def resolve(self):
                raise RuntimeError("boom")

        monkeypatch.setattr(context, "user_session", lambda appkey, **config: BrokenSession())
        canvas = Canvas(Container(), context, {"id": "home", "appkey": "k"})

        with pytest.raises(CanvasError) as exc_info:
            await canvas.bootstrap()

        assert exc_info.value.code == ErrorCode.CANVAS_BOOTSTRAP_FAILED
        assert exc_info.value.details == {"cause": "RuntimeError", "state": "MESSAGING_READY"}
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert canvas.state is CanvasState.ERROR
        assert [event["code"] for event in published] == ["canvas_bootstrap_failed"]
        assert context.loader.downloads == []


# ──────────────────────────────────────────────────────────────────────────────
# Testes: Falhas isoladas de descritor
# ──────────────────────────────────────────────────────────────────────────────


class TestDescriptorErrors:
    """Descritores inválidos não impedem os demais apps."""

    @pytest.mark.asyncio
    async def test_descriptor_without_script_is_skipped(self) -> None:
        doc = {
            "apps": [
                *CANVAS_DOC["apps"],
                {"id": "broken", "component": "Widgets.Broken"},
            ],
        }
        context = _context(doc)
        published = _errors(context)
        canvas = Canvas(Container(), context, {"id": "home", "appkey": "k"})

        await canvas.bootstrap()

        assert len(canvas.apps) == 2
        assert len(canvas.errors) == 1
        assert isinstance(canvas.errors[0], PartialResourceError)
        assert canvas.errors[0].code == ErrorCode.INCOMPLETE_APP_CONFIG
        assert [event["code"] for event in published] == ["incomplete_app_config"]
        assert canvas.state is CanvasState.APPS_INSTANTIATED

    @pytest.mark.asyncio
    async def test_descriptor_without_id_requires_manual_config(self) -> None:
        doc = {"apps": [{"component": "Widgets.Counter", "script": "https://cdn.test/counter.js"}]}
        canvas = Canvas(Container(), _context(doc), {"id": "home", "appkey": "k"})

        await canvas.bootstrap()

        assert len(canvas.apps) == 0
        assert [error.code for error in canvas.errors] == ["incomplete_app_config"]

    @pytest.mark.asyncio
    async def test_failed_script_reports_unable_to_load(self) -> None:
        bundles = {"https://cdn.test/stream.js": {"Widgets.Stream": FakeWidget}}
        canvas = Canvas(Container(), _context(bundles=bundles), {"id": "home", "appkey": "k"})

        await canvas.bootstrap()

        assert canvas.apps.ids() == ["stream"]
        assert [error.code for error in canvas.errors] == ["unable_to_load_app_script"]
        assert canvas.errors[0].details["script"] == "https://cdn.test/counter.js"

    @pytest.mark.asyncio
    async def test_no_suitable_app_class(self) -> None:
        context = _context(bundles={})
        context.components.define("Widgets.Stream", FakeWidget)
        context.components.define("Widgets.Counter", FakeWidget)
        canvas = Canvas(Container(), context, {"id": "home", "appkey": "k"})
        original_get = context.components.get
        context.components.get = lambda name: None if name == "Widgets.Counter" else original_get(name)

        await canvas.bootstrap()

        assert canvas.apps.ids() == ["stream"]
        assert len(canvas.errors) == 1
        assert isinstance(canvas.errors[0], AppResolutionError)
        assert canvas.errors[0].code == ErrorCode.NO_SUITABLE_APP_CLASS

    @pytest.mark.asyncio
    async def test_constructor_failure_is_isolated(self) -> None:
        bundles = {
            "https://cdn.test/stream.js": {"Widgets.Stream": ExplodingWidget},
            "https://cdn.test/counter.js": {"Widgets.Counter": FakeWidget},
        }
        container = Container()
        canvas = Canvas(container, _context(bundles=bundles), {"id": "home", "appkey": "k"})

        await canvas.bootstrap()

        assert canvas.apps.ids() == ["counter"]
        assert [error.code for error in canvas.errors] == ["app_init_failed"]
        assert [slot.app_id for slot in container.slots] == ["counter"]


# ──────────────────────────────────────────────────────────────────────────────
# Testes: destroy
# ──────────────────────────────────────────────────────────────────────────────


class TestDestroy:
    """destroy() libera apps e o container."""

    @pytest.mark.asyncio
    async def test_destroy_clears_marker_and_allows_rebootstrap(self) -> None:
        context = _context()
        container = Container()
        canvas = Canvas(container, context, {"id": "home", "appkey": "k"})
        await canvas.bootstrap()
        instances = [entry.instance for entry in canvas.apps]

        canvas.destroy()

        assert all(instance.destroy_calls == 1 for instance in instances)
        assert len(canvas.apps) == 0
        assert container.is_initialized is False
        assert container.slots == []

        await canvas.bootstrap()
        assert canvas.state is CanvasState.APPS_INSTANTIATED
        assert len(canvas.apps) == 2

    @pytest.mark.asyncio
    async def test_destroy_of_rejected_canvas_keeps_marker(self) -> None:
        context = _context()
        container = Container()
        await Canvas(container, context, {"id": "home", "appkey": "k"}).bootstrap()
        rejected = Canvas(container, context, {"id": "home", "appkey": "k"})
        with pytest.raises(AlreadyInitializedError):
            await rejected.bootstrap()

        rejected.destroy()

        assert container.is_initialized is True
