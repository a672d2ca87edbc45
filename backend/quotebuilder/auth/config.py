"""
Settings of the authentication module.

The token check is a plain signature/expiry check against a shared secret;
there is no user store behind it.
"""
import os
from typing import Optional

# --- JWT ---
# No default: requests are refused with a 500 while it is unset.
JWT_SECRET_KEY: Optional[str] = os.getenv("JWT_SECRET_KEY")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

BEARER_SCHEME_NAME: str = "JWT"
