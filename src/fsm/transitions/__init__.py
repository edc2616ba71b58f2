"""
Exports públicos do módulo fsm/transitions.

Regras de transição válidas entre estados das máquinas.
"""

from fsm.transitions.rules import (
    CANVAS_TRANSITIONS,
    SESSION_TRANSITIONS,
    TransitionMap,
    get_valid_targets,
    is_transition_valid,
    terminal_states,
    validate_transition_map,
)

__all__ = [
    "CANVAS_TRANSITIONS",
    "SESSION_TRANSITIONS",
    "TransitionMap",
    "get_valid_targets",
    "is_transition_valid",
    "terminal_states",
    "validate_transition_map",
]
