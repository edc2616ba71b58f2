"""
Regras de transição válidas para as máquinas de sessão e de canvas.

Cada máquina tem seu próprio mapa: chave = estado de origem,
valor = conjunto de estados de destino permitidos. Estados com
conjunto vazio são terminais.
"""

from enum import StrEnum

from fsm.states.canvas import CanvasState
from fsm.states.session import SessionState

# Tipagem explícita do mapa de transições
TransitionMap = dict[StrEnum, frozenset[StrEnum]]

SESSION_TRANSITIONS: TransitionMap = {
    SessionState.UNINITIALIZED: frozenset({SessionState.WAITING}),
    # READY após sucesso; retorno ao estado anterior após falha de rede
    SessionState.WAITING: frozenset({
        SessionState.READY,
        SessionState.UNINITIALIZED,
    }),
    # Re-resolução (invalidação) sempre passa por WAITING
    SessionState.READY: frozenset({SessionState.WAITING}),
}

CANVAS_TRANSITIONS: TransitionMap = {
    CanvasState.UNCONFIGURED: frozenset({
        CanvasState.CONFIG_RESOLVED,
        CanvasState.ERROR,
    }),
    CanvasState.CONFIG_RESOLVED: frozenset({
        CanvasState.MESSAGING_READY,
        CanvasState.ERROR,
    }),
    CanvasState.MESSAGING_READY: frozenset({
        CanvasState.SESSION_READY,
        CanvasState.ERROR,
    }),
    CanvasState.SESSION_READY: frozenset({
        CanvasState.RESOURCES_LOADED,
        CanvasState.ERROR,
    }),
    CanvasState.RESOURCES_LOADED: frozenset({
        CanvasState.APPS_INSTANTIATED,
        CanvasState.ERROR,
    }),
    CanvasState.APPS_INSTANTIATED: frozenset(),
    CanvasState.ERROR: frozenset(),
}


def get_valid_targets(state: StrEnum, transitions: TransitionMap) -> frozenset[StrEnum]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem
        transitions: Mapa de transições da máquina

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return transitions.get(state, frozenset())


def terminal_states(transitions: TransitionMap) -> frozenset[StrEnum]:
    """Estados sem nenhuma transição de saída."""
    return frozenset(state for state, targets in transitions.items() if not targets)


def is_transition_valid(
    from_state: StrEnum,
    to_state: StrEnum,
    transitions: TransitionMap,
) -> bool:
    """
    Verifica se uma transição é válida segundo o mapa informado.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        transitions: Mapa de transições da máquina

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return to_state in get_valid_targets(from_state, transitions)


def validate_transition_map(
    transitions: TransitionMap,
    state_type: type[StrEnum],
) -> list[str]:
    """
    Valida a integridade de um mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Nenhuma transição aponta para estado de outro enum

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in state_type:
        if state not in transitions:
            errors.append(f"Estado {state.name} ausente no mapa de transições")

    for from_state, targets in transitions.items():
        for target in targets:
            if not isinstance(target, state_type):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors
