from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.db import db_ping

router = APIRouter(tags=["health"])

@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

# readiness check
@router.get("/ready")
def ready():
    ok = db_ping()
    body: dict = {"status": "ok" if ok else "unready", "checks": {"db": ok}}

    # returns 200 only when the db is reachable
    return JSONResponse(status_code=200 if ok else 503, content=body)
