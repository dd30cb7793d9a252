"""FastAPI application entrypoint for the Campus Support Suite API."""
import time
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_suite.api import auth, content, loans, scholarships, shop
from campus_suite.api.deps import get_store
from campus_suite.core.config import settings
from campus_suite.core.errors import CampusError
from campus_suite.core.logging import get_logger, setup_logging

# Initialize structured logging
log_format = settings.environment == "production"
setup_logging(level=settings.log_level, json_format=log_format)
logger = get_logger(__name__)

# Application metadata
APP_VERSION = "1.0.0"
APP_NAME = "Campus Support Suite API"

app = FastAPI(
    title=APP_NAME,
    description="Loans, scholarships, campus shop, banners and notifications for students",
    version=APP_VERSION,
    docs_url="/docs" if settings.environment != "production" else None,  # Disable in prod
    redoc_url="/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Middleware to log all requests with timing and status code."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path}",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else None,
        }
    )

    try:
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Request failed: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round(duration_ms, 2),
                "error": str(e),
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error", "request_id": request_id}
        )


@app.exception_handler(CampusError)
async def campus_error_handler(request: Request, exc: CampusError):
    """Translate domain errors into ``{"success": false, "message": ...}`` responses."""
    log = logger.error if exc.http_status >= 500 else logger.info
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "path": request.url.path,
            "status_code": exc.http_status,
        }
    )
    body = {"success": False, "message": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.http_status, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are a 400, like every other input error."""
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "error": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Missing or invalid fields", "details": details},
    )


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("Application starting up", extra={"version": APP_VERSION})


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Application shutting down")


for module in (auth, loans, scholarships, shop, content):
    app.include_router(module.router, prefix=settings.api_prefix)


@app.get("/")
def root():
    """Root endpoint with basic service info."""
    return {
        "service": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
        "environment": settings.environment
    }


@app.get("/health")
def health_check():
    """Liveness probe. Returns 200 while the process is serving."""
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "checks": {
            "api": "ok",
            "email": "ok" if settings.smtp_configured else "not_configured",
        }
    }


@app.get("/ready")
def readiness_check(store=Depends(get_store)):
    """Readiness probe: the document store must answer a ping."""
    checks = {
        "store": "ok" if store.ping() else "unavailable",
        "email": "ok" if settings.smtp_configured else "not_configured",
    }

    all_ok = checks["store"] == "ok"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={"status": "ready" if all_ok else "degraded", "checks": checks},
    )
