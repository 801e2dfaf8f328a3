"""API authentication using API keys and the forwarded user id"""
import logging
from typing import Optional
from fastapi import Header, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src import config
from src.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_api_keys() -> list[str]:
    """API keys accepted from the trusted frontend"""
    if not config.API_KEYS:
        logger.warning("No API_KEYS configured in environment")
    return config.API_KEYS


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    Verify API key from Authorization header

    Args:
        credentials: HTTP authorization credentials

    Returns:
        The verified API key

    Raises:
        HTTPException: If API key is invalid
    """
    api_key = credentials.credentials
    valid_keys = get_api_keys()

    if not valid_keys:
        logger.error("No API keys configured - rejecting all requests")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    if api_key not in valid_keys:
        logger.warning(f"Invalid API key attempt: {api_key[:10]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    logger.debug(f"API key validated: {api_key[:10]}...")
    return api_key


async def get_optional_user_id(
    x_user_id: Optional[str] = Header(default=None)
) -> Optional[str]:
    """Signed-in user forwarded by the frontend, None for anonymous requests"""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


async def require_user_id(
    x_user_id: Optional[str] = Header(default=None)
) -> str:
    """
    Signed-in user forwarded by the frontend

    Raises:
        AuthenticationError: 401 when no user is present
    """
    user_id = await get_optional_user_id(x_user_id)
    if not user_id:
        raise AuthenticationError("No signed-in user on request", operation="require_user_id")
    return user_id
