"""API — camada de borda.

Adapters concretos para os protocolos de app.protocols: HTTP/JSON,
backplane e carregamento de scripts.
"""
