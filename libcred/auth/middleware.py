"""Org context middleware.

Reads the ``X-Org-Id`` header and sets ``request.state.org_id``. Requests
without the header fall back to the configured default org. Authentication
and org membership checks happen upstream of this service.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from libcred.config import config


class OrgContextMiddleware(BaseHTTPMiddleware):
    """Org scoping middleware."""

    HEADER = "X-Org-Id"

    # Paths that don't need an org
    PUBLIC_PATHS = {"/api/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, default_org_id: int = None):
        super().__init__(app)
        self.default_org_id = default_org_id if default_org_id is not None else config.default_org_id

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.PUBLIC_PATHS:
            return await call_next(request)

        raw = request.headers.get(self.HEADER)
        if raw is None:
            org_id = self.default_org_id
        else:
            try:
                org_id = int(raw)
            except ValueError:
                return JSONResponse({"detail": f"Invalid {self.HEADER} header"}, status_code=400)

        if org_id <= 0:
            return JSONResponse({"detail": f"Invalid {self.HEADER} header"}, status_code=400)

        request.state.org_id = org_id
        return await call_next(request)
