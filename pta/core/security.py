# pta/core/security.py
"""
Verification of the auth provider's access tokens.

Sessions are owned by the auth provider; this service only checks the
signature and expiry of the bearer token and reads the subject from it.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import ExpiredSignatureError, JWTError, jwt

from pta.core.config import settings
from pta.core.errors import TokenError
from pta.core.logging import logger


class SecurityConfig:
    """Security configuration constants"""
    TOKEN_EXPIRE_MINUTES = 60
    BEARER_PREFIX = "bearer "
    COOKIE_NAME = "access_token"


async def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token and return its claims.

    Raises TokenError when the signature, expiry or audience check fails,
    or when the token carries no subject.
    """
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET.get_secret_value(),
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options=options,
        )
    except ExpiredSignatureError:
        raise TokenError("Token has expired")
    except JWTError as e:
        logger.warning(f"Token verification failed: {str(e)}")
        raise TokenError("Could not validate credentials")

    if not payload.get("sub"):
        raise TokenError("Token has no subject")
    return payload


def create_token(subject: str, expires_delta: Optional[timedelta] = None, **claims) -> str:
    """
    Sign a token the way the auth provider does.

    Used by local tooling and the test-suite; production tokens come from the provider.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=SecurityConfig.TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(subject), "exp": expire, **claims}
    if settings.AUTH_JWT_AUDIENCE and "aud" not in to_encode:
        to_encode["aud"] = settings.AUTH_JWT_AUDIENCE
    return jwt.encode(
        to_encode,
        settings.AUTH_JWT_SECRET.get_secret_value(),
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )


def extract_token(authorization: Optional[str], cookie: Optional[str]) -> Optional[str]:
    """Read the token from ``Authorization: Bearer`` or, failing that, the access-token cookie"""
    raw = authorization or cookie
    if not raw:
        return None
    raw = raw.strip().strip('"')
    if raw.lower().startswith(SecurityConfig.BEARER_PREFIX):
        raw = raw[len(SecurityConfig.BEARER_PREFIX):].strip()
    return raw or None
