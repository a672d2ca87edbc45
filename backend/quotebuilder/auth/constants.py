"""
Constants of the authentication module.
"""

# --- Error messages ---
ERROR_TOKEN_MISSING = "Authentication required"
ERROR_TOKEN_INVALID = "Invalid token"
ERROR_SECRET_NOT_CONFIGURED = "JWT secret is not configured"

# --- HTTP headers ---
HEADER_WWW_AUTHENTICATE = "WWW-Authenticate"
HEADER_WWW_AUTHENTICATE_VALUE = "Bearer"
