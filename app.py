"""
MedsBuddy Backend
Main FastAPI application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime

# Configuration and database
from config import settings
from database import init_db, DatabaseHealthCheck

from api import include_routers

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


ERROR_CATEGORIES = {
    400: "validation",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "validation",
}


def error_category(status_code: int) -> str:
    if status_code >= 500:
        return "server_error"
    return ERROR_CATEGORIES.get(status_code, "client_error")


def error_response(status_code: int, message, details=None, headers=None) -> JSONResponse:
    content = {
        "error": True,
        "category": error_category(status_code),
        "message": message,
        "status_code": status_code,
        "timestamp": datetime.utcnow().isoformat()
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


# ==================== LIFESPAN ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENV}")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    if not settings.CRON_SECRET:
        logger.warning("CRON_SECRET is not set; the missed-dose job endpoint will reject all calls")
    if not settings.MAIL_HOST:
        logger.warning("MAIL_HOST is not set; caretaker alerts will only be logged")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")


# ==================== APP INITIALIZATION ====================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## MedsBuddy API

    Medication adherence tracking for patients and their caretakers.

    ### Features
    - **Medications**: Patients keep a list of daily medications with a scheduled time
    - **Dose logging**: One "taken" log per medication per day
    - **Dashboards**: Taken / pending / missed status for patients and caretakers
    - **Missed-dose alerts**: An hourly job emails caretakers about overdue doses
    """,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Attach modular API routers
include_routers(app, prefix=settings.API_PREFIX)


# ==================== EXCEPTION HANDLERS ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid JSON")

    details = [
        {
            "field": ".".join(str(part) for part in e.get("loc", ()) if part != "body"),
            "message": e.get("msg"),
            "type": e.get("type"),
        }
        for e in errors
    ]
    return error_response(
        422,
        "Validation failed",
        details=jsonable_encoder(details)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred" if not settings.DEBUG else str(exc)
    )


# ==================== HEALTH ====================

@app.get("/health", tags=["health"])
async def health_check():
    """Liveness and database connectivity"""
    db_ok = DatabaseHealthCheck.is_connected()
    return {
        "status": "healthy" if db_ok else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": "connected" if db_ok else "unavailable",
        "email": "smtp" if settings.MAIL_HOST else "log-only",
        "timestamp": datetime.utcnow().isoformat()
    }


@app.get("/", tags=["health"])
async def root():
    return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
