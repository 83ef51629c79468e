# src/cityscope/main.py
"""Main entry point for the Cityscope application."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from cityscope.api.v1 import auth_router, posts_router, users_router
from cityscope.core.errors import CityscopeError, StorageError, Unauthenticated
from cityscope.core.settings import settings
from cityscope.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Neighborhood social feed API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Every failure renders as ErrorResponse
_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 500)
}

# Include API routers
for router in (auth_router, posts_router, users_router):
    app.include_router(router, prefix="/api", responses=_ERROR_RESPONSES)

# Uploaded post images
app.mount(
    settings.media_url,
    StaticFiles(directory=settings.media_dir, check_dir=False),
    name="media",
)


@app.exception_handler(CityscopeError)
async def handle_domain_error(request: Request, exc: CityscopeError) -> JSONResponse:
    """Render domain errors as ``{message}`` bodies with their HTTP status."""
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies and parameters like service validation errors."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        errors.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation Error", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework-raised errors in the same ``{message}`` shape."""
    message = str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


@app.on_event("startup")
async def on_startup() -> None:
    Path(settings.media_dir).mkdir(parents=True, exist_ok=True)
    logger.info("%s %s starting (debug=%s)", settings.app_name, settings.app_version, settings.debug)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, object]:
    """Root endpoint with basic information about the API."""
    return {
        "message": f"{settings.app_name} is running!",
        "version": settings.app_version,
        "endpoints": {
            "auth": "/api/auth",
            "posts": "/api/posts",
            "users": "/api/users",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cityscope.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
