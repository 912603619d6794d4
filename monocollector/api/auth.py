"""
API key authentication for the collection service

Keys identify a client application (the web app, an admin script), not a
collector: any valid key may read and write every user's collection, and
the collector is named by the `user_id` path segment. Health and metrics
routes stay public.
"""
import os
import logging
from fastapi import HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_api_keys() -> list[str]:
    """Comma-separated API_KEYS, re-read on every call so keys can be rotated without a restart"""
    api_keys_str = os.getenv("API_KEYS", "")
    if not api_keys_str:
        logger.warning("No API_KEYS configured in environment")
        return []
    return [key.strip() for key in api_keys_str.split(",") if key.strip()]


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    Check the `Authorization: Bearer <key>` header of a collection request

    A service started without API_KEYS refuses all authenticated routes
    rather than running open.

    Raises:
        HTTPException: 503 when no keys are configured, 401 for an unknown key
    """
    api_key = credentials.credentials
    valid_keys = get_api_keys()

    if not valid_keys:
        logger.error("No API keys configured - collection routes are disabled")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    if api_key not in valid_keys:
        logger.warning(f"Rejected collection request with unknown API key {api_key[:6]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    return api_key
