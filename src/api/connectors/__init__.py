"""Connectors — adapters de borda para serviços externos.

Estrutura:
- http/: cliente httpx e cliente de requisições JSON
- backplane/: canal de mensagens entre contextos (memória, Redis)
- resources/: carregamento de scripts dos apps
"""

__all__: list[str] = []
