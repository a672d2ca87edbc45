"""
JWT helpers: token creation (tooling and tests) and token verification.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from quotebuilder.auth import config as auth_config
from quotebuilder.auth.exceptions import SecretNotConfiguredError

logger = logging.getLogger(__name__)


def _secret() -> str:
    # Read at call time so the secret can be changed without re-importing
    secret = auth_config.JWT_SECRET_KEY
    if not secret:
        logger.error("[Auth] JWT_SECRET_KEY is not set.")
        raise SecretNotConfiguredError("JWT_SECRET_KEY is not set")
    return secret


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a signed JWT carrying `data` and an expiry."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=auth_config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _secret(), algorithm=auth_config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Returns the token claims, or None when the token is invalid or expired.

    Raises:
        SecretNotConfiguredError: when no secret is configured.
    """
    secret = _secret()
    try:
        return jwt.decode(token, secret, algorithms=[auth_config.JWT_ALGORITHM])
    except JWTError as e:
        # Covers expiry and bad signatures
        logger.warning(f"[Auth] JWT decode error: {e}")
        return None
