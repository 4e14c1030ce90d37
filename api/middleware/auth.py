"""
Authentication Middleware

X-API-Key check for the admin endpoints.
"""

import secrets
from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyHeader

from api.config import get_settings
from api.middleware.errors import AuthenticationError

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def is_valid_key(api_key: str, valid_keys) -> bool:
    """Constant-time match against every configured key."""
    return any(secrets.compare_digest(api_key, key) for key in valid_keys)


async def verify_api_key(
    api_key: Optional[str] = Security(api_key_header)
) -> str:
    """
    Verify the API key from the request header.

    With debug on and no keys configured every request is let through.
    """
    settings = get_settings()

    if settings.debug and not settings.api_key_list:
        return "debug-mode"

    if not api_key:
        raise AuthenticationError(
            "AUTH_REQUIRED",
            "API key required. Include X-API-Key header.",
        )

    if not is_valid_key(api_key, settings.api_key_list):
        raise AuthenticationError("INVALID_API_KEY", "Invalid API key.")

    return api_key
