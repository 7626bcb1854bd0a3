from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig

SESSION_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("identity_id", "sid")


def generate_jwt(identity_id: UUID, session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a session token.

    The token names the identity and the session only. It never carries a
    role: access is resolved on the server for every request.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_TTL_MINUTES)
    issued_at = datetime.now(UTC)
    claims = {
        "identity_id": str(identity_id),
        "sid": session_id,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(claims, ApplicationConfig.JWT_SECRET, algorithm=SESSION_ALGORITHM)


def verify_jwt(token: str) -> Optional[dict]:
    """Decoded claims, or None for a bad signature, an expired token or missing claims"""
    try:
        claims = jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=[SESSION_ALGORITHM])
    except JWTError:
        return None
    if any(not claims.get(name) for name in REQUIRED_CLAIMS):
        return None
    return claims
