"""Despacho de atributos da sessão.

get/set/is/has/any consultam uma tabela explícita (ação, atributo) ->
handler. Sem handler especializado, a ação cai no fallback padrão.
Assim poucos atributos (name, avatar, sessionID, logged...) sobrescrevem
o armazenamento padrão sem casos especiais nos chamadores.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any

Handler = Callable[..., Any]


class Action(StrEnum):
    """Ações despacháveis."""

    GET = "get"
    SET = "set"
    IS = "is"
    HAS = "has"
    ANY = "any"


class AttributeDispatcher:
    """Tabela de handlers por (ação, atributo) com fallback por ação.

    Handlers especializados recebem apenas os argumentos da ação;
    fallbacks recebem o atributo seguido dos argumentos.
    """

    __slots__ = ("_fallbacks", "_handlers")

    def __init__(self) -> None:
        self._handlers: dict[tuple[Action, str], Handler] = {}
        self._fallbacks: dict[Action, Handler] = {}

    def register(self, action: Action, key: str, handler: Handler) -> None:
        self._handlers[(action, key)] = handler

    def register_fallback(self, action: Action, handler: Handler) -> None:
        self._fallbacks[action] = handler

    def dispatch(self, action: Action, key: str, *args: Any) -> Any:
        """Executa o handler de (action, key) ou o fallback da ação."""
        handler = self._handlers.get((action, key))
        if handler is not None:
            return handler(*args)
        fallback = self._fallbacks.get(action)
        return fallback(key, *args) if fallback is not None else None
