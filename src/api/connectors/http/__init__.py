"""Conectores HTTP (httpx)."""

from api.connectors.http.base import HttpClient, HttpClientConfig, HttpError
from api.connectors.http.json_api import JsonApiClient, create_json_api_client

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "HttpError",
    "JsonApiClient",
    "create_json_api_client",
]
