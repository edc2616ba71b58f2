"""Sessão de usuário compartilhada pela página.

Exporta a sessão, o dispatcher de atributos e o listener de invalidação.
"""

from app.sessions.dispatch import Action, AttributeDispatcher
from app.sessions.invalidation import InvalidationListener
from app.sessions.models import (
    DEFAULT_USER_STATE,
    RESERVED_KEYS,
    RESERVED_NAMESPACE,
    normalize_identity_payload,
)
from app.sessions.user_session import UserSession

__all__ = [
    "DEFAULT_USER_STATE",
    "RESERVED_KEYS",
    "RESERVED_NAMESPACE",
    "Action",
    "AttributeDispatcher",
    "InvalidationListener",
    "UserSession",
    "normalize_identity_payload",
]
