"""
Bearer tokens for the identity seam: HS256 JWTs whose ``sub`` is the actor's
user id. Login itself lives with the identity provider.
"""
import uuid
from datetime import datetime, timedelta, timezone

import jwt

from app.config import settings

class InvalidToken(Exception):
    pass

def issue_access_token(actor_id: str | uuid.UUID, *, expires_in: timedelta | None = None) -> str:
    issued = datetime.now(timezone.utc)
    ttl = expires_in if expires_in is not None else timedelta(minutes=settings.jwt_expires_minutes)
    claims = {
        "sub": str(actor_id),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm="HS256")

def actor_id_from_token(token: str) -> uuid.UUID:
    """Verify signature, expiry, issuer and audience; return the actor id."""
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp"]},
        )
        return uuid.UUID(claims["sub"])
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise InvalidToken(str(e)) from e
