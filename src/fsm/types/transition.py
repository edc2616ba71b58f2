"""
Registros de transição das máquinas de sessão e de canvas.

Cada transição aplicada vira um StateTransition no histórico da
máquina; tentativas negadas retornam TransitionResult com o motivo.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Transição aplicada.

    Attributes:
        from_state: Estado de origem
        to_state: Estado de destino
        trigger: Gatilho (ex: 'identity_received', 'stage_config_resolved')
        machine_id: Máquina que transitou ('user_session' ou id do canvas)
        metadata: Dados extras para logs (sem dados de identidade)
        timestamp: Momento da transição (UTC)
    """

    from_state: StrEnum
    to_state: StrEnum
    trigger: str
    machine_id: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    @property
    def is_self_loop(self) -> bool:
        return self.from_state == self.to_state

    def to_log_dict(self) -> dict[str, Any]:
        """Representação para logs estruturados."""
        return {
            "machine_id": self.machine_id,
            "from_state": str(self.from_state),
            "to_state": str(self.to_state),
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            **({"metadata": self.metadata} if self.metadata else {}),
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de FSMStateMachine.transition().

    `transition` presente se e somente se `success`; `error_reason`
    presente se e somente se a transição foi negada.
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
