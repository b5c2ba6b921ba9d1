"""
Request id + activity logging middleware.

Every response carries x-request-id; each request is logged with its query
string passed through redact() so tokens and signatures never reach the log.
"""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware

from Security.secrets_redaction import redact
from Security.security_logging import get_security_logger


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response


class ActivityLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        self.logger = get_security_logger("activity", root="storefront")

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        query = request.url.query
        if query:
            query = redact(query)
        self.logger.info(
            "method=%s path=%s query=%s status=%s request_id=%s ip=%s",
            request.method,
            request.url.path,
            query or "",
            response.status_code,
            getattr(request.state, "request_id", "") or "",
            request.client.host if request.client else "unknown",
        )
        return response
