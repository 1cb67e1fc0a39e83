import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from booker.api import (
    credential_router,
    health_router,
    records_router,
    transfer_router,
)
from booker.config import settings
from booker.db.database import init_db
from booker.models.failure import ApiResponse, KnownError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("booker"),
    lifespan=lifespan,
)

app.include_router(credential_router)
app.include_router(health_router)
app.include_router(records_router)
app.include_router(transfer_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render known failures as a classified envelope."""
    logger.info("known_failure", extra={"kind": exc.kind.value, "detail": exc.detail})
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Render anything unexpected as an unknown failure instead of a raw 500 body."""
    logger.exception("unknown_failure")
    return JSONResponse(
        status_code=500,
        content=ApiResponse.unknown_failure(detail=type(exc).__name__).model_dump(mode="json"),
    )
