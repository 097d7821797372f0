"""FastAPI application wiring for the account service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import ConnectionPool

from .api.routes import register_error_handlers, router as user_router
from .config import Settings, get_settings
from .domain.service import AccountService
from .repository import AccountRepository
from .security.passwords import CredentialHasher
from .security.tokens import TokenGenerator, TokenManager

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_service(repository: AccountRepository, config: Settings) -> AccountService:
    """Assemble the account service and its security collaborators from configuration."""
    token_manager = TokenManager(
        repository,
        TokenGenerator(length=config.token_length),
        ttl=timedelta(seconds=config.token_ttl_seconds),
    )
    return AccountService(repository, CredentialHasher(rounds=config.bcrypt_rounds), token_manager)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise shared resources (Postgres pool, services) for the app lifecycle."""
    pool = ConnectionPool(settings.database_url, open=False)
    pool.open()
    repository = AccountRepository(pool)
    repository.ensure_schema()
    app.state.pool = pool
    app.state.account_service = build_service(repository, settings)
    logger.info("%s %s ready", settings.app_name, settings.version)
    try:
        yield
    finally:
        pool.close()


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    """Return a minimal readiness indicator used by orchestration systems."""
    return {"status": "ok"}


@app.get("/metrics", tags=["health"])
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(user_router)
register_error_handlers(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.http_host, port=settings.http_port)
