"""correlation_id dos logs de bootstrap.

Durante Canvas.bootstrap() o correlation_id é o id do canvas, de modo
que os logs da sessão, do backplane e do loader disparados por aquele
pipeline fiquem agrupados. ContextVar: cada task asyncio enxerga o
próprio valor.

Uso:
    token = set_correlation_id(canvas.id)
    try:
        await run_stages()
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("canvas_correlation_id", default="")


def get_correlation_id() -> str:
    """correlation_id atual ("" fora de um bootstrap)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; sem valor (canvas manual, sem id) gera um UUID."""
    return _correlation_id.set(correlation_id or uuid.uuid4().hex)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)
