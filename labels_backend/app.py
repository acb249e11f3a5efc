"""
Labels backend: FastAPI application serving the label routes.

Local server:
    uvicorn labels_backend.app:app --reload --host 0.0.0.0 --port 8001
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labels_backend import config
from labels_backend.core.logging import configure_logging
from labels_backend.database_indexes import ensure_all_indexes
from labels_backend.domain.errors import LabelsError
from labels_backend.routers import labels as labels_router
from labels_backend.store.document_store import MongoDocumentStore, get_document_store

configure_logging()
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# Lifespan (startup / shutdown)
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Runs once on startup, yields for the lifetime of the app, then cleans up."""
    logger.info("Initialising document store...")
    store = get_document_store()
    if config.ENSURE_INDEXES and isinstance(store, MongoDocumentStore):
        ensure_all_indexes(store.db)
    logger.info("Document store ready (%s).", store.backend)

    yield

    if isinstance(store, MongoDocumentStore):
        store.close()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Labels",
    version=VERSION,
    description="Label assignment across alerts, attributions, budgets, metrics and reports",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

@app.exception_handler(LabelsError)
async def labels_error_handler(request: Request, exc: LabelsError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "type": type(exc).__name__},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "invalid request body", "type": "ValidationError", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def store_failure_handler(request: Request, exc: Exception):
    # Driver errors (pymongo) and bugs land here with their traceback.
    logger.error(
        "%s on %s %s", type(exc).__name__, request.method, request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "internal error", "type": type(exc).__name__},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(labels_router.router)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/api/health")
async def health():
    """Store connectivity status."""
    store = get_document_store()
    db_status = "ok"
    try:
        store.ping()
    except Exception as exc:
        db_status = f"error: {exc}"
    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "version": VERSION,
        "store": store.backend,
        "db": db_status,
    }


# ---------------------------------------------------------------------------
# Development entry-point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("labels_backend.app:app", host="0.0.0.0", port=config.PORT, reload=True)
