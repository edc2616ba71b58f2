"""Normalização do payload de identidade.

O endpoint whoami devolve um documento opaco; o core depende apenas de:
    - echo.{state, roles, markers}: namespace reservado
    - poco.entry.accounts: contas de provedores (identidades)
    - em cada conta: loggedIn, identityUrl, displayName, username, photos

A normalização sempre produz o namespace reservado com coleções
vazias por padrão, mesmo para payload vazio ou ausente.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

# Namespace reservado no payload de identidade
RESERVED_NAMESPACE = "echo"

# Atributos armazenados no namespace reservado (os demais vão na identidade ativa)
RESERVED_KEYS = frozenset({"roles", "state", "markers"})

DEFAULT_USER_STATE = "Untouched"

# Valor de "loggedIn" que marca uma conta como ativa (string, não bool)
LOGGED_IN_FLAG = "true"

AVATAR_PHOTO_TYPE = "avatar"


def normalize_identity_payload(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Normaliza o payload de identidade num formato fixo.

    O mapeamento recebido não é mutado.

    Args:
        data: Payload bruto (ou None/vazio para "sem sessão").

    Returns:
        Dict com "echo" {state, roles, markers}, "poco" {"entry": {...}}
        e "identities" (lista de contas, possivelmente vazia).
    """
    normalized: dict[str, Any] = copy.deepcopy(dict(data or {}))

    namespace = normalized.get(RESERVED_NAMESPACE)
    namespace = dict(namespace) if isinstance(namespace, Mapping) else {}
    namespace["state"] = namespace.get("state") or DEFAULT_USER_STATE
    namespace["roles"] = list(namespace.get("roles") or [])
    namespace["markers"] = list(namespace.get("markers") or [])
    normalized[RESERVED_NAMESPACE] = namespace

    poco = normalized.get("poco")
    if not isinstance(poco, Mapping):
        poco = {"entry": {}}
    poco = dict(poco)
    entry = poco.get("entry")
    poco["entry"] = dict(entry) if isinstance(entry, Mapping) else {}
    normalized["poco"] = poco

    accounts = poco["entry"].get("accounts")
    normalized["identities"] = accounts if isinstance(accounts, list) else []
    return normalized


def logged_in_accounts(accounts: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Filtra contas com loggedIn == "true", preservando a ordem."""
    return [
        account
        for account in accounts
        if isinstance(account, Mapping) and account.get("loggedIn") == LOGGED_IN_FLAG
    ]


def first_photo(identity: Mapping[str, Any], photo_type: str = AVATAR_PHOTO_TYPE) -> str | None:
    """Retorna o valor da primeira foto do tipo informado (ou None)."""
    for photo in identity.get("photos") or []:
        if isinstance(photo, Mapping) and photo.get("type") == photo_type:
            return photo.get("value")
    return None
