"""Main FastAPI application."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from familyvault import __version__
from familyvault.config import config
from familyvault.database import init_db
from familyvault.errors import (
    DefaultEntityProtected,
    InvalidName,
    NameConflict,
    NotFoundOrForbidden,
    TransientConflict,
    VaultError,
)
from familyvault.logging_config import configure_logging
from familyvault.routes import auth, vault


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Apply migrations before serving."""
    await init_db()
    yield


configure_logging(debug=config.DEBUG)
config.ensure_media_dirs()


app = FastAPI(
    title="Family Vault",
    description="Per-user document vault organised by category and subcategory",
    version=__version__,
    lifespan=lifespan,
)

access_logger = logging.getLogger("familyvault.access")
logger = logging.getLogger("familyvault.api")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests similar to the access log."""

    response = await call_next(request)
    client_host = "-"
    if request.client is not None:
        client_host = request.client.host or "-"

    access_logger.info(
        '%s - "%s %s" %s',
        client_host,
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


def _error_body(exc: VaultError) -> dict[str, str]:
    return {"detail": exc.message, "operation": exc.operation}


@app.exception_handler(NotFoundOrForbidden)
async def not_found_handler(_request: Request, exc: NotFoundOrForbidden) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(exc))


@app.exception_handler(TransientConflict)
async def conflict_handler(_request: Request, exc: TransientConflict) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_body(exc))


@app.exception_handler(NameConflict)
async def name_conflict_handler(_request: Request, exc: NameConflict) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_body(exc))


@app.exception_handler(DefaultEntityProtected)
async def protected_handler(
    _request: Request, exc: DefaultEntityProtected
) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=_error_body(exc))


@app.exception_handler(InvalidName)
async def invalid_name_handler(_request: Request, exc: InvalidName) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=_error_body(exc)
    )


@app.exception_handler(VaultError)
async def vault_error_handler(_request: Request, exc: VaultError) -> JSONResponse:
    logger.error("Vault operation failed: %s", exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=_error_body(exc))


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(vault.router)
