import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from benefit_tracker.config import settings
from benefit_tracker.database import SessionLocal, init_db
from benefit_tracker.routers import benefits, cards, data, expiring, minimum_spends, resets
from benefit_tracker.schemas.records import RecordValidationError
from benefit_tracker.storage import StorageError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Using %s storage backend", settings.storage_backend)
    yield


app = FastAPI(title="Benefit Tracker API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(RecordValidationError)
async def record_validation_handler(request: Request, exc: RecordValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": "Record set failed validation", "errors": exc.errors},
    )


def _cors_kwargs() -> dict:
    """Build CORSMiddleware origin kwargs based on ALLOWED_ORIGINS setting."""
    raw = settings.allowed_origins.strip()
    if raw == "*" or not raw:
        return {"allow_origin_regex": ".*"}
    origins = []
    for origin in raw.split(","):
        origin = origin.strip()
        if not origin:
            continue
        parsed = urlparse(origin)
        if parsed.scheme and parsed.netloc:
            origins.append(origin)
        else:
            logger.warning("Skipping invalid ALLOWED_ORIGINS entry (missing scheme/host): %s", origin)
    return {"allow_origins": origins}


app.add_middleware(
    CORSMiddleware,
    **_cors_kwargs(),
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(cards.router)
app.include_router(benefits.router)
app.include_router(minimum_spends.router)
app.include_router(resets.router)
app.include_router(expiring.router)
app.include_router(data.router)


@app.get("/api/health")
def health():
    if settings.storage_backend == "local":
        try:
            db = SessionLocal()
            try:
                db.execute(text("SELECT 1"))
            finally:
                db.close()
        except Exception:
            logger.exception("Health check could not reach the database")
            return JSONResponse(status_code=503, content={"status": "error", "detail": "Database unreachable"})
    return {"status": "ok", "storage": settings.storage_backend}
