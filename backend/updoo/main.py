from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from updoo import models  # noqa: F401
from updoo.api import applications, auth, favorites, follows, listings, proposals, reference
from updoo.bootstrap import seed_defaults
from updoo.config import settings
from updoo.database import Base, SessionLocal, engine
from updoo.errors import ConflictError, InvalidState, LifecycleError, NotFound, Unauthorized, ValidationError
from updoo.logging_config import setup_logging


setup_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ValidationError: 422,
    InvalidState: 409,
    Unauthorized: 403,
    NotFound: 404,
    ConflictError: 409,
}

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    if isinstance(exc, ConflictError):
        logger.warning("Write conflict on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__, "retryable": exc.retryable},
    )


@app.on_event("startup")
def on_startup() -> None:
    settings.ensure_directories()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(reference.router, prefix="/api/reference", tags=["reference"])
app.include_router(listings.router, prefix="/api/listings", tags=["listings"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(favorites.router, prefix="/api/favorites", tags=["favorites"])
app.include_router(follows.router, prefix="/api/follows", tags=["follows"])
app.include_router(proposals.router, prefix="/api/proposals", tags=["proposals"])
