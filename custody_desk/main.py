# Main application file



import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from custody_desk.core.config import settings
from custody_desk.core.errors import CustodyDeskError
from custody_desk.core.rate_limiter import limiter
from custody_desk.core.scheduler import start_scheduler, stop_scheduler
import custody_desk.models  # noqa: F401
from custody_desk.schemas.common import describe_errors
from custody_desk.routers import (
    audit,
    items,
    movements,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("custody_desk")


# LIFESPAN (overdue sweep; tables come from Alembic migrations)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.OVERDUE_SWEEP_ENABLED:
        start_scheduler()

    try:
        yield
    finally:
        if settings.OVERDUE_SWEEP_ENABLED:
            stop_scheduler()


# APP INIT

app = FastAPI(
    title="Custody Desk API",
    description="Checkout, return and overdue tracking for items held by a custody desk",
    version="1.0.0",
    lifespan=lifespan,
)



# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "X-Desk-Operator"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# ERROR HANDLING

@app.exception_handler(CustodyDeskError)
async def custody_desk_error_handler(request: Request, exc: CustodyDeskError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": type(exc).__name__},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": describe_errors(exc), "error": "ValidationError"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Unable to complete operation"},
    )


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(items.router)
app.include_router(movements.router)
app.include_router(audit.router)



# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Custody Desk API is running"}
