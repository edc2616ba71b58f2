"""
Módulo FSM — máquinas de estado da sessão de usuário e do canvas.

Estrutura:
    - states/: Definições dos estados (SessionState, CanvasState)
    - transitions/: Mapas de transição (SESSION_TRANSITIONS, CANVAS_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (FSMStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

# Manager
from fsm.manager import (
    FSMStateMachine,
    InvalidTransitionError,
    create_canvas_fsm,
    create_session_fsm,
)

# Guards/Rules
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)

# Estados
from fsm.states import (
    DEFAULT_CANVAS_STATE,
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    CanvasState,
    SessionState,
    is_terminal,
    is_valid_state,
)

# Transições
from fsm.transitions import (
    CANVAS_TRANSITIONS,
    SESSION_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    terminal_states,
    validate_transition_map,
)

# Types
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "CANVAS_TRANSITIONS",
    "DEFAULT_CANVAS_STATE",
    "DEFAULT_INITIAL_STATE",
    "SESSION_TRANSITIONS",
    "TERMINAL_STATES",
    "CanvasState",
    "FSMStateMachine",
    "GuardResult",
    "InvalidTransitionError",
    "SessionState",
    "StateTransition",
    "TransitionResult",
    "create_canvas_fsm",
    "create_session_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "terminal_states",
    "validate_transition_map",
]
