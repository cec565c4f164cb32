"""API authentication using API keys, plus the acting-user header"""
import os
import logging
from typing import Optional
from fastapi import Header, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from wellness.exceptions import AuthenticationError
from wellness.identity import RequestIdentity

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_api_keys() -> frozenset[str]:
    """Dashboard client keys from API_KEYS (comma-separated), read on every call"""
    return frozenset(key.strip() for key in os.getenv("API_KEYS", "").split(",") if key.strip())


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    Check the dashboard client's bearer key

    Raises:
        HTTPException: 503 when no keys are configured, 401 for an unknown key
    """
    valid_keys = get_api_keys()
    if not valid_keys:
        logger.error("API_KEYS is empty; progress endpoints are refusing every request")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Progress API keys are not configured"
        )

    if credentials.credentials not in valid_keys:
        logger.warning("Rejected progress request with an unrecognized API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unrecognized API key"
        )

    return credentials.credentials


async def get_request_identity(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")
) -> RequestIdentity:
    """
    Identity of the user the request acts for

    Raises:
        AuthenticationError: header missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Missing X-User-Id header", operation="get_request_identity")
    return RequestIdentity(x_user_id.strip())
