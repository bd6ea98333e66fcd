import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import get_settings
from app.exceptions import InvalidBody, UploadUrlError
from app.routers import upload
from app.schemas.response import ApiResponse
import structlog

settings = get_settings()

logging.basicConfig(format="%(message)s", level=settings.log_level)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Create FastAPI app
app = FastAPI(
    title="Upload URL API",
    description="Issues presigned S3 URLs for direct image uploads",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(upload.router)


def envelope_response(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.fail(message, error).to_json(),
    )


@app.exception_handler(UploadUrlError)
async def upload_url_error_handler(_: Request, exc: UploadUrlError):
    logger.warning(
        "Upload URL request failed",
        status_code=exc.status_code,
        reason=exc.message,
        error=exc.error
    )
    return envelope_response(exc.status_code, exc.message, exc.error)


def describe_validation_error(error: dict) -> str:
    # Integer parts of the location are decoder offsets, not field names
    location = ".".join(
        str(item) for item in error["loc"] if item != "body" and not isinstance(item, int)
    ) or "body"
    message = error["msg"]
    cause = (error.get("ctx") or {}).get("error")
    if cause:
        message = f"{message}: {cause}"
    return f"{location}: {message}"


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(describe_validation_error(error) for error in exc.errors())
    return await upload_url_error_handler(request, InvalidBody(detail or "request failed validation"))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "upload-url-api",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
