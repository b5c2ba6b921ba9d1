from __future__ import annotations

import json

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from Security.errors import MasterKeyError, SecurityError
from Security.security_logging import get_security_logger

from .customer_service import CustomerExistsError, VerificationLockedError


logger = get_security_logger("errors", root="storefront")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CustomerExistsError)
    async def customer_exists_handler(request: Request, exc: CustomerExistsError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(VerificationLockedError)
    async def verification_locked_handler(request: Request, exc: VerificationLockedError):
        return JSONResponse(status_code=429, content={"detail": str(exc)})

    @app.exception_handler(MasterKeyError)
    async def master_key_handler(request: Request, exc: MasterKeyError):
        logger.error("master key unavailable path=%s", request.url.path)
        return JSONResponse(status_code=503, content={"detail": "Service unavailable"})

    @app.exception_handler(SecurityError)
    async def security_error_handler(request: Request, exc: SecurityError):
        logger.error("security error path=%s error=%s", request.url.path, exc.__class__.__name__)
        return JSONResponse(status_code=500, content={"detail": "An error occurred"})

    @app.exception_handler(json.JSONDecodeError)
    async def corrupt_payload_handler(request: Request, exc: json.JSONDecodeError):
        logger.error("stored payload is not valid JSON path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": "An error occurred"})
