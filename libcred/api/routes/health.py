"""GET /api/health — Health check with real service probes."""

import logging
from fastapi import APIRouter, Request
from libcred.api.schemas import HealthResponse
from libcred.version import __version__

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Check health of the database and the secret store."""
    services: dict[str, bool] = {"api": True, "database": False, "secret_store": False}

    # Database
    try:
        async_session = request.app.state.async_session
        async with async_session() as session:
            from sqlalchemy import text
            await session.execute(text("SELECT 1"))
        services["database"] = True
    except Exception as exc:
        logger.warning(f"[health] DB check failed: {exc}")

    # Secret store: a round trip proves the key is usable
    try:
        secret_store = request.app.state.secret_store
        services["secret_store"] = secret_store.decrypt(secret_store.encrypt("ping")) == "ping"
    except Exception as exc:
        logger.warning(f"[health] Secret store check failed: {exc}")

    overall = "ok" if all(services.values()) else "degraded"
    return HealthResponse(status=overall, version=__version__, services=services)
