"""Carregamento de scripts dos apps."""

from api.connectors.resources.loader import (
    ScriptLoader,
    ScriptRejectedError,
    bundle_module_name,
    create_script_loader,
    script_digest,
)

__all__ = [
    "ScriptLoader",
    "ScriptRejectedError",
    "bundle_module_name",
    "create_script_loader",
    "script_digest",
]
