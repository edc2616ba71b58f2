"""Cliente de requisições JSON (identidade, logout, storage de canvas).

Converte falhas de transporte em NetworkError, que é o que sessão e
canvas tratam.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from api.connectors.http.base import HttpClient, HttpClientConfig, HttpError
from app.constants.canvas import ErrorCode
from app.protocols.api_client import ApiClientProtocol
from utils.errors import NetworkError

if TYPE_CHECKING:
    import httpx

    from config.settings import CanvasSettings

logger = logging.getLogger(__name__)


class JsonApiClient(HttpClient, ApiClientProtocol):
    """GET com corpo JSON."""

    async def request(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Executa GET e retorna o JSON decodificado.

        Raises:
            NetworkError: falha de transporte, status de erro ou JSON inválido.
        """
        try:
            response = await self.get(endpoint, params=params)
        except HttpError as exc:
            logger.warning(
                "api_request_failed",
                extra={"endpoint": endpoint, "status_code": exc.status_code, "reason": str(exc)},
            )
            raise NetworkError(
                ErrorCode.REQUEST_FAILED,
                details={"endpoint": endpoint, "status_code": exc.status_code},
            ) from exc
        return _decode(response, endpoint)


def _decode(response: httpx.Response, endpoint: str) -> Any:
    try:
        data = response.json()
    except ValueError as exc:
        # JSONDecodeError e UnicodeDecodeError (corpo fora de UTF-8)
        logger.warning("api_invalid_json", extra={"endpoint": endpoint})
        raise NetworkError(
            ErrorCode.REQUEST_FAILED,
            details={"endpoint": endpoint, "reason": "invalid_json"},
        ) from exc
    logger.debug("api_request_ok", extra={"endpoint": endpoint, "status_code": response.status_code})
    return data


def create_json_api_client(
    settings: CanvasSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> JsonApiClient:
    """Factory do cliente com timeout/retries das settings.

    Args:
        settings: CanvasSettings opcional. Se None, carrega do ambiente.
        transport: Transporte httpx alternativo.
    """
    from config.settings import get_canvas_settings

    canvas = settings or get_canvas_settings()
    config = HttpClientConfig(
        timeout_seconds=canvas.request_timeout_seconds,
        max_retries=canvas.max_retries,
    )
    return JsonApiClient(config=config, transport=transport)
