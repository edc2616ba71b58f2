"""
Guards e invariantes para transições de estado.

Guards complementam o mapa de transições: mesmo uma transição
presente no mapa pode ser negada por um guard.
"""

from collections.abc import Callable
from enum import StrEnum

from fsm.transitions.rules import TransitionMap, terminal_states


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[StrEnum, StrEnum, TransitionMap], GuardResult]


def guard_valid_state(
    from_state: StrEnum,
    to_state: StrEnum,
    transitions: TransitionMap,
) -> GuardResult:
    """
    Guard: ambos os estados pertencem à máquina.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        transitions: Mapa de transições da máquina

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_state not in transitions:
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")

    if to_state not in transitions:
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")

    return GuardResult.allow()


def guard_terminal_state(
    from_state: StrEnum,
    to_state: StrEnum,
    transitions: TransitionMap,
) -> GuardResult:
    """Guard: estados terminais não permitem saída."""
    if from_state in terminal_states(transitions):
        return GuardResult.deny(
            f"Estado {from_state.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_same_state(
    from_state: StrEnum,
    to_state: StrEnum,
    transitions: TransitionMap,
) -> GuardResult:
    """Guard: transições reflexivas nunca são permitidas."""
    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


# Lista de guards a serem aplicados em ordem
# Todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
]


def evaluate_guards(
    from_state: StrEnum,
    to_state: StrEnum,
    transitions: TransitionMap,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        transitions: Mapa de transições da máquina
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state, transitions)
        if not result.allowed:
            return result

    return GuardResult.allow()
