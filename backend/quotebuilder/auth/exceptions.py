"""
Exceptions of the authentication module.
"""
from fastapi import HTTPException, status

from quotebuilder.auth.constants import (
    ERROR_SECRET_NOT_CONFIGURED,
    ERROR_TOKEN_INVALID,
    ERROR_TOKEN_MISSING,
    HEADER_WWW_AUTHENTICATE,
    HEADER_WWW_AUTHENTICATE_VALUE,
)


class TokenMissingException(HTTPException):
    """No Authorization header, or one that is not a bearer token."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_TOKEN_MISSING,
            headers={HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE},
        )


class TokenInvalidException(HTTPException):
    """Token that cannot be decoded, has a bad signature or has expired."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_TOKEN_INVALID,
            headers={HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE},
        )


class SecretNotConfiguredException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ERROR_SECRET_NOT_CONFIGURED,
        )


class SecretNotConfiguredError(RuntimeError):
    """Raised by the token helpers when JWT_SECRET_KEY is unset."""
