"""
FastAPI dependencies for authentication.
"""
import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from quotebuilder.auth.config import BEARER_SCHEME_NAME
from quotebuilder.auth.exceptions import (
    SecretNotConfiguredError,
    SecretNotConfiguredException,
    TokenInvalidException,
    TokenMissingException,
)
from quotebuilder.auth.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(scheme_name=BEARER_SCHEME_NAME, auto_error=False)


async def require_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Dict[str, Any]:
    """
    Checks the bearer token of the request and returns its claims.

    Raises:
        TokenMissingException: no header, or not a Bearer header.
        TokenInvalidException: the token does not verify.
        SecretNotConfiguredException: the server has no JWT secret.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        logger.warning("[Auth] Missing or non-bearer Authorization header.")
        raise TokenMissingException()

    try:
        claims = decode_access_token(credentials.credentials)
    except SecretNotConfiguredError:
        raise SecretNotConfiguredException()

    if claims is None:
        logger.warning("[Auth] Invalid token.")
        raise TokenInvalidException()

    logger.debug(f"[Auth] Token accepted (sub={claims.get('sub')})")
    return claims
