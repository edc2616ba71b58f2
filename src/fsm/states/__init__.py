"""
Exports públicos do módulo fsm/states.

Estados da sessão de usuário e do pipeline de canvas.
"""

from fsm.states.canvas import (
    DEFAULT_CANVAS_STATE,
    TERMINAL_STATES,
    CanvasState,
    is_terminal,
)
from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    SessionState,
    is_valid_state,
)

__all__ = [
    "DEFAULT_CANVAS_STATE",
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "CanvasState",
    "SessionState",
    "is_terminal",
    "is_valid_state",
]
