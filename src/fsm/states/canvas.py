"""
Estados do pipeline de bootstrap do canvas.

Cada estágio concluído avança um estado. ERROR é alcançável a partir
de qualquer estado não-terminal; APPS_INSTANTIATED e ERROR são terminais.
"""

from enum import StrEnum


class CanvasState(StrEnum):
    """
    Estados do pipeline de bootstrap.

    Estados não-terminais:
        - UNCONFIGURED: Canvas criado, nada resolvido
        - CONFIG_RESOLVED: Configuração (lista de apps) obtida
        - MESSAGING_READY: Backplane inicializado
        - SESSION_READY: Sessão resolvida (ou dispensada)
        - RESOURCES_LOADED: Scripts dos apps válidos carregados

    Estados terminais:
        - APPS_INSTANTIATED: Apps instanciados e registrados
        - ERROR: Falha fatal do pipeline
    """

    UNCONFIGURED = "UNCONFIGURED"
    CONFIG_RESOLVED = "CONFIG_RESOLVED"
    MESSAGING_READY = "MESSAGING_READY"
    SESSION_READY = "SESSION_READY"
    RESOURCES_LOADED = "RESOURCES_LOADED"
    APPS_INSTANTIATED = "APPS_INSTANTIATED"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


TERMINAL_STATES: frozenset[CanvasState] = frozenset({
    CanvasState.APPS_INSTANTIATED,
    CanvasState.ERROR,
})

DEFAULT_CANVAS_STATE: CanvasState = CanvasState.UNCONFIGURED


def is_terminal(state: CanvasState) -> bool:
    """
    Verifica se o estado do canvas é terminal.

    Args:
        state: Estado a ser verificado

    Returns:
        True se o pipeline não avança mais a partir deste estado
    """
    return state in TERMINAL_STATES
