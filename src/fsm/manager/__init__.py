"""
Exports públicos do módulo fsm/manager.

Máquina de estados genérica e factories por domínio.
"""

from fsm.manager.machine import (
    FSMStateMachine,
    InvalidTransitionError,
    create_canvas_fsm,
    create_session_fsm,
)

__all__ = [
    "FSMStateMachine",
    "InvalidTransitionError",
    "create_canvas_fsm",
    "create_session_fsm",
]
