import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.rbac.errors import NOT_FOUND_ERRORS, AuthzError, Forbidden, LastOwnerViolation
from app.store import StorageUnavailable

logger = logging.getLogger(__name__)

def _body(detail: str, code: str) -> dict:
    return {"detail": detail, "code": code}

async def authz_error_handler(request: Request, exc: AuthzError) -> JSONResponse:
    # internal code is always logged, the response may hide it
    logger.info("authz error code=%s path=%s detail=%s", exc.code, request.url.path, exc)

    if isinstance(exc, LastOwnerViolation):
        return JSONResponse(status_code=409, content=_body(str(exc), exc.code))

    if isinstance(exc, NOT_FOUND_ERRORS):
        if settings.conceal_existence:
            return JSONResponse(status_code=403, content=_body("forbidden", Forbidden.code))
        return JSONResponse(status_code=404, content=_body("not found", exc.code))

    return JSONResponse(status_code=403, content=_body("forbidden", Forbidden.code))

async def storage_error_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error("storage unavailable path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=503, content=_body("storage unavailable", "storage_unavailable"))

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthzError, authz_error_handler)
    app.add_exception_handler(StorageUnavailable, storage_error_handler)
