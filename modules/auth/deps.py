"""
Auth Module - Dependencies
===========================
FastAPI dependencies that build the request-scoped API client.
These are injected into route handlers via Depends().

NOTE: The storefront never issues or decodes tokens. It forwards the bearer
token it receives (Authorization header, or the auth_token cookie set by the
identity provider's front-end SDK) to the remote API.
"""

from typing import Iterator, Optional

from fastapi import Depends, Request

from config.settings import AUTH_COOKIE
from common.api_client import ApiClient
from common.exceptions import AuthenticationError


def get_bearer_token(request: Request) -> Optional[str]:
    """
    Extract the caller's token.
    Header wins over cookie. Returns None for anonymous visitors.
    """
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(AUTH_COOKIE) or None


def get_api(token: Optional[str] = Depends(get_bearer_token)) -> Iterator[ApiClient]:
    """One ApiClient per request, closed when the response is sent."""
    api = ApiClient(token_provider=lambda: token)
    try:
        yield api
    finally:
        api.close()


def require_login(api: ApiClient = Depends(get_api)) -> ApiClient:
    """Require a bearer token. Raises AuthenticationError (→ 401) otherwise."""
    if not api.is_authenticated:
        raise AuthenticationError()
    return api
