"""
Máquina de estados (FSMStateMachine) genérica.

Controla transições segundo um mapa explícito e mantém histórico
rastreável. Instanciada para a sessão de usuário e para cada canvas.
"""

from enum import StrEnum
from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.canvas import DEFAULT_CANVAS_STATE
from fsm.states.session import DEFAULT_INITIAL_STATE
from fsm.transitions.rules import (
    CANVAS_TRANSITIONS,
    SESSION_TRANSITIONS,
    TransitionMap,
    get_valid_targets,
    is_transition_valid,
    terminal_states,
)
from fsm.types.transition import StateTransition, TransitionResult


class InvalidTransitionError(RuntimeError):
    """Transição negada pelo mapa ou por um guard."""


class FSMStateMachine:
    """
    Máquina de estados dirigida por um mapa de transições.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_machine_id", "_transitions")

    def __init__(
        self,
        transitions: TransitionMap,
        initial_state: StrEnum,
        machine_id: str = "",
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            transitions: Mapa de transições válidas
            initial_state: Estado inicial
            machine_id: Identificador para logs
        """
        self._transitions = transitions
        self._current_state = initial_state
        self._history: list[StateTransition] = []
        self._machine_id = machine_id

    @property
    def current_state(self) -> StrEnum:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def machine_id(self) -> str:
        """Identificador da máquina."""
        return self._machine_id

    @property
    def is_terminal(self) -> bool:
        """Verifica se está em estado terminal."""
        return self._current_state in terminal_states(self._transitions)

    def get_valid_targets(self) -> frozenset[StrEnum]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state, self._transitions)

    def transition(
        self,
        target: StrEnum,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'identity_received')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target, self._transitions):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(
            self._current_state, target, self._transitions
        )
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            machine_id=self._machine_id,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def transition_or_raise(
        self,
        target: StrEnum,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> StateTransition:
        """
        Realiza a transição ou levanta InvalidTransitionError.

        Usado nos fluxos internos, onde uma transição negada indica
        defeito de programação e não condição de negócio.
        """
        result = self.transition(target, trigger, metadata)
        if not result.success or result.transition is None:
            raise InvalidTransitionError(result.error_reason or "transição negada")
        return result.transition

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "machine_id": self._machine_id,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_session_fsm(machine_id: str = "user_session") -> FSMStateMachine:
    """
    Factory da máquina da sessão de usuário.

    Args:
        machine_id: Identificador para logs

    Returns:
        FSMStateMachine em UNINITIALIZED
    """
    return FSMStateMachine(
        transitions=SESSION_TRANSITIONS,
        initial_state=DEFAULT_INITIAL_STATE,
        machine_id=machine_id,
    )


def create_canvas_fsm(canvas_id: str = "") -> FSMStateMachine:
    """
    Factory da máquina de um canvas.

    Args:
        canvas_id: Identificador do canvas para logs

    Returns:
        FSMStateMachine em UNCONFIGURED
    """
    return FSMStateMachine(
        transitions=CANVAS_TRANSITIONS,
        initial_state=DEFAULT_CANVAS_STATE,
        machine_id=canvas_id,
    )
