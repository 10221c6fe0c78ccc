"""FastAPI application factory with lifespan management."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from libcred.config import config
from libcred.version import __version__


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        return response

logger = logging.getLogger(__name__)


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    # ── Startup ──
    logger.info(f"libcred v{__version__} starting...")

    # 1. Database
    from libcred.db.database import init_db, async_session, engine
    await init_db()
    app.state.async_session = async_session

    # 2. Secret store
    from libcred.credentials.encryption import FernetSecretStore
    app.state.secret_store = FernetSecretStore(key=config.secret_encryption_key)

    logger.info(f"libcred v{__version__} ready")

    yield

    # ── Shutdown ──
    logger.info("libcred shutting down...")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()
    app = FastAPI(
        title="libcred",
        description="Org-scoped library credentials with encrypted secret fields.",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    from libcred.auth.middleware import OrgContextMiddleware
    app.add_middleware(OrgContextMiddleware)

    # Security headers: outermost middleware, applied to all responses
    app.add_middleware(SecurityHeadersMiddleware)

    # Routes
    from libcred.api.routes import health, library_credentials
    app.include_router(health.router, prefix="/api")
    app.include_router(library_credentials.router, prefix="/api")

    return app


app = create_app()
