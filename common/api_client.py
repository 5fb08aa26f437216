"""
Nepify Storefront - REST API Client
=====================================
Single httpx wrapper for every call to the remote Nepify API.

- Attaches `Authorization: Bearer <token>` when a token provider yields one
- Normalizes the `{success, message, data?, error?}` envelope
- Raises TransportError / ResponseParseError / ApiRequestError uniformly

The client is built per request (see modules/auth/deps.py) and passed
into the service layer, the same way a DB session would be.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from config.settings import API_BASE_URL, API_PREFIX, API_TIMEOUT
from common.exceptions import (
    GENERIC_FAILURE, ApiRequestError, ResponseParseError, TransportError,
)

logger = logging.getLogger("nepify.api")

TokenProvider = Callable[[], Optional[str]]


@dataclass
class ApiResponse:
    """Normalized response envelope."""
    success: bool
    message: str = ""
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ApiResponse":
        if not isinstance(payload, dict):
            # Bare JSON value without envelope: treat as data
            return cls(success=True, data=payload)
        return cls(
            success=bool(payload.get("success", False)),
            message=payload.get("message") or "",
            data=payload.get("data"),
            error=payload.get("error"),
        )


class ApiClient:

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = API_TIMEOUT,
        prefix: str = API_PREFIX,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.prefix = prefix
        self._token_provider = token_provider
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token())

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ==========================================
    # Core request
    # ==========================================

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        prefixed: bool = True,
    ) -> ApiResponse:
        path = f"{self.prefix}{endpoint}" if prefixed else endpoint
        headers = {}
        token = self._token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug(f"{method} {path}")
        try:
            resp = self._http.request(method, path, json=body, params=params or None, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out: {e}")
            raise TransportError("The server did not respond. Please try again.") from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise TransportError(GENERIC_FAILURE) from e

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning(f"{method} {path} returned non-JSON body (HTTP {resp.status_code})")
            if not resp.is_success:
                raise ApiRequestError(GENERIC_FAILURE, status_code=resp.status_code) from e
            raise ResponseParseError("Unexpected response from server") from e

        if not resp.is_success:
            message = GENERIC_FAILURE
            if isinstance(payload, dict):
                message = payload.get("error") or payload.get("message") or GENERIC_FAILURE
            logger.warning(f"{method} {path} -> {resp.status_code}: {message}")
            raise ApiRequestError(message, status_code=resp.status_code)

        return ApiResponse.from_payload(payload)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request(endpoint, "GET", params=params)

    def post(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request(endpoint, "POST", body=body)

    def put(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request(endpoint, "PUT", body=body)

    def patch(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request(endpoint, "PATCH", body=body)

    def delete(self, endpoint: str) -> ApiResponse:
        return self.request(endpoint, "DELETE")

    def health(self) -> bool:
        """The unprefixed /health answers a bare {"status": "ok"}; any 2xx counts."""
        self.request("/health", prefixed=False)
        return True

    # ==========================================
    # Private helpers
    # ==========================================

    def _token(self) -> Optional[str]:
        if not self._token_provider:
            return None
        return self._token_provider() or None
