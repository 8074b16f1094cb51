"""
HTTP client for the PostgREST-style task API.

Centralises all HTTP communication with the remote collection resources so
that every call automatically carries the API key, the bearer token and
the ``Prefer: return=representation`` header (which makes mutating
requests echo back the affected rows), and respects the configured
timeout.

Transport-level and HTTP-level failures are translated into
:class:`~store_app.results.ApiError` so that callers only ever handle a
single exception type.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from .results import ApiError, ErrorKind

logger = logging.getLogger(__name__)


def _response_error_message(response: requests.Response, default: str) -> str:
    """
    Extract an error message from a JSON API response if possible.

    PostgREST reports failures as ``{"message": ..., "details": ...,
    "hint": ..., "code": ...}``; other gateways commonly use ``error``.
    Falls back to *default* when the body is not JSON or neither field
    holds a usable string.

    Args:
        response: The :class:`requests.Response` that carried an error status.
        default: Fallback message returned when extraction fails.

    Returns:
        The extracted error string, or *default*.
    """
    try:
        payload = response.json()
    except ValueError:
        return default
    if not isinstance(payload, dict):
        return default
    for key in ("message", "error"):
        message = payload.get(key)
        if isinstance(message, str) and message.strip():
            return message
    return default


class ApiClient:
    """
    Thin wrapper around :func:`requests.request` bound to one API root.

    Args:
        base_url: Root URL of the API (e.g. ``"https://x.supabase.co/rest/v1"``).
        api_key: Key sent both as the ``apikey`` header and as the bearer token.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method (``"GET"``, ``"POST"``, ``"PATCH"``, ``"DELETE"``).
            path: Resource path relative to the base URL (e.g. ``"/tasks"``).
            **kwargs: Forwarded to :func:`requests.request` (``params``, ``json``).

        Returns:
            The parsed JSON body, or ``None`` when the response has no body.

        Raises:
            ApiError: On timeout, connection failure, an error status, or
                a body that is not valid JSON.
        """
        url = self.url(path)
        extra_headers = kwargs.pop("headers", {})
        headers = {**self.headers, **extra_headers}
        logger.debug("%s %s params=%s", method, url, kwargs.get("params"))

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            raise ApiError(ErrorKind.TIMEOUT, f"{method} {path} timed out") from exc
        except requests.RequestException as exc:
            raise ApiError(ErrorKind.NETWORK, f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 400:
            message = _response_error_message(
                response, f"{method} {path} returned {response.status_code}"
            )
            raise ApiError(ErrorKind.HTTP, message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(ErrorKind.DECODE, f"{method} {path} returned invalid JSON") from exc

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: dict[str, Any]) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, params: dict[str, Any], json: dict[str, Any]) -> Any:
        return self.request("PATCH", path, params=params, json=json)

    def delete(self, path: str, params: dict[str, Any]) -> Any:
        return self.request("DELETE", path, params=params)
