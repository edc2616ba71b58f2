"""
Estados do ciclo de vida da sessão de usuário.

A sessão alterna UNINITIALIZED → WAITING → READY → WAITING → READY...
e nunca chega a READY sem passar por WAITING. Não há estado terminal:
a sessão vive enquanto a página (PageContext) existir.
"""

from enum import StrEnum


class SessionState(StrEnum):
    """
    Estados da sessão de usuário.

    Estados:
        - UNINITIALIZED: Nenhuma resolução de identidade foi iniciada
        - WAITING: Requisição de identidade em andamento
        - READY: Dados de identidade normalizados disponíveis
    """

    UNINITIALIZED = "UNINITIALIZED"
    WAITING = "WAITING"
    READY = "READY"

    def __str__(self) -> str:
        return self.value


# Estado inicial padrão para novas sessões
DEFAULT_INITIAL_STATE: SessionState = SessionState.UNINITIALIZED


def is_valid_state(state: object) -> bool:
    """
    Verifica se o valor é um estado válido (de sessão ou de canvas).

    Args:
        state: Estado a ser verificado

    Returns:
        True se é membro de um dos enums de estado
    """
    from fsm.states.canvas import CanvasState

    return isinstance(state, SessionState | CanvasState)
