"""
FastAPI main application.
"""
import logging
import traceback

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import ALLOWED_ORIGINS, API_PREFIX, APP_ENV, PORT
from core.config_validator import config_validator
from core.exceptions import AppError
from core.llm_client import llm_client
from core.log_config import configure_logging
from api.models.responses import ErrorResponse, HealthResponse
from api.middleware import request_monitor, security_headers, validate_content
from api.routes import ai, monitoring, notes, web_summary, workspaces, youtube_summary
from services.processing.utils import utc_now_iso

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Notes AI Backend",
    description="Content extraction, transcripts and streaming AI summaries for the notes app",
    version="1.0.0",
)


@app.on_event("startup")
async def validate_configuration():
    """Validate configuration on application startup."""
    logger.info("Validating configuration...")

    validation_result = config_validator.validate_all()

    for warning in validation_result["warnings"]:
        logger.warning(warning)

    if not validation_result["valid"]:
        for error in validation_result["errors"]:
            logger.error(error)
        logger.critical("Application startup aborted due to configuration errors")
        raise SystemExit(1)

    logger.info(f"Configuration validated successfully ({APP_ENV})")


@app.on_event("shutdown")
async def close_clients():
    await llm_client.aclose()


# Middleware
app.middleware("http")(request_monitor)
app.middleware("http")(security_headers)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if APP_ENV == "production" else ["*"],
    allow_credentials=APP_ENV == "production",
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-API-Key"],
)


# Error handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part != "body")
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "message": "; ".join(messages)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        content = {"error": "Not Found", "message": "The requested endpoint does not exist"}
    else:
        content = {"error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {
        "error": "Internal Server Error",
        "message": str(exc) if APP_ENV == "development" else "Something went wrong",
    }
    if APP_ENV == "development":
        content["stack"] = traceback.format_exc()
    return JSONResponse(status_code=500, content=content)


# Include routers
content_checks = [Depends(validate_content)]
error_responses = {status: {"model": ErrorResponse} for status in (400, 401, 403, 404, 408, 413, 500, 503)}
app.include_router(web_summary.router, prefix=f"{API_PREFIX}/web-summary", tags=["web-summary"], dependencies=content_checks, responses=error_responses)
app.include_router(youtube_summary.router, prefix=f"{API_PREFIX}/youtube-summary", tags=["youtube-summary"], dependencies=content_checks, responses=error_responses)
app.include_router(ai.router, prefix=f"{API_PREFIX}/ai", tags=["ai"], dependencies=content_checks, responses=error_responses)
app.include_router(notes.router, prefix=f"{API_PREFIX}/notes", tags=["notes"], dependencies=content_checks, responses=error_responses)
app.include_router(workspaces.router, prefix=f"{API_PREFIX}/workspaces", tags=["workspaces"], dependencies=content_checks, responses=error_responses)
app.include_router(monitoring.router, prefix=f"{API_PREFIX}/monitoring", tags=["monitoring"], responses=error_responses)


@app.get("/", response_model=HealthResponse, response_model_exclude_none=True)
async def root():
    """Root endpoint."""
    return {"status": "OK", "message": "Notes AI Backend is running", "timestamp": utc_now_iso()}


@app.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "uptime": monitoring.uptime_seconds(), "timestamp": utc_now_iso()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
