"""Modelos da configuração do canvas (documento do storage).

Campos desconhecidos são ignorados; apenas apps e backplane são lidos.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class ScriptPair(BaseModel):
    """URLs alternativas do bundle por modo (debug/produção)."""

    model_config = ConfigDict(extra="ignore")

    dev: str | None = Field(default=None, description="Bundle usado em modo debug.")
    prod: str | None = Field(default=None, description="Bundle usado em produção.")

    @property
    def is_complete(self) -> bool:
        return bool(self.dev and self.prod)


class AppDescriptor(BaseModel):
    """Descrição de um app dentro do canvas."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    component: str | None = Field(default=None, description="Identificador da classe do app.")
    script: str | None = Field(default=None, description="URL ou módulo do bundle.")
    scripts: ScriptPair | None = Field(default=None, description="Bundles por modo.")
    caption: str | None = Field(default=None, description="Título exibido no cabeçalho.")
    id: str | None = Field(default=None, description="Chave do app (overrides).")
    config: dict[str, Any] = Field(default_factory=dict, description="Config do app.")
    integrity: dict[str, str] = Field(
        default_factory=dict,
        description="Hash fixado por URL de bundle (\"sha256:<hex>\").",
    )

    @field_validator("config", "integrity", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def resolve_script(self, debug: bool) -> str | None:
        """Bundle do app: scripts[dev|prod] se ambos existirem, senão script."""
        if self.scripts is not None and self.scripts.is_complete:
            return self.scripts.dev if debug else self.scripts.prod
        return self.script


class CanvasData(BaseModel):
    """Documento de configuração do canvas."""

    model_config = ConfigDict(extra="ignore")

    apps: list[AppDescriptor] = Field(default_factory=list)
    backplane: dict[str, Any] = Field(default_factory=dict)

    @field_validator("apps", "backplane", mode="before")
    @classmethod
    def _none_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return [] if info.field_name == "apps" else {}
        return value


__all__ = ["AppDescriptor", "CanvasData", "ScriptPair"]
