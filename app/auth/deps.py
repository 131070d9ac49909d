import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.tokens import InvalidToken, actor_id_from_token
from app.db import get_db
from app.models.user import User
from app.store import Store

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    """Authenticated actor for the request; 401 when there is none."""
    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="missing bearer token")

    try:
        actor_id = actor_id_from_token(creds.credentials)
    except InvalidToken as e:
        logger.info("rejected bearer token: %s", e)
        raise HTTPException(status_code=401, detail="invalid token")

    # an outage here surfaces as 503, not as an unknown user
    user = Store(db).get_user(actor_id)
    if user is None:
        raise HTTPException(status_code=401, detail="user not found")
    return user
