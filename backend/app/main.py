"""
Main FastAPI application.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.error_responses import ErrorMessages
from app.core.logging_config import setup_logging
from app.middleware import RequestLoggingMiddleware

# Initialize logging configuration at startup
setup_logging()

logger = logging.getLogger(__name__)

ERROR_CODE_HEADER = "X-Error-Code"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan event handler.

    The calculator keeps no connections or caches, so startup and shutdown
    only log the configuration in effect.
    """
    logger.info(
        f"{settings.APP_NAME} {settings.APP_VERSION} starting "
        f"(env={settings.ENV}, default_mode={settings.RCI_DEFAULT_MODE.value})"
    )

    yield

    logger.info(f"{settings.APP_NAME} shutting down")


# OpenAPI tags metadata
tags_metadata = [
    {
        "name": "health",
        "description": "Liveness checks for load balancers and uptime monitors",
    },
    {
        "name": "rci",
        "description": "Reliable Change Index calculation for pre/post score comparisons",
    },
]


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "**RCI Calculator API** - judge whether a pre/post score change is "
            "larger than measurement error.\n\n"
            "This API provides:\n"
            "* Reliable Change Index calculation from a pre-test score, a "
            "post-test score, the measure's standard deviation and its "
            "reliability coefficient\n"
            "* Two equivalent reporting conventions: z-score comparison and "
            "NCSS-style threshold comparison\n\n"
            "Every calculation is independent; nothing is stored."
        ),
        license_info={
            "name": "MIT",
        },
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        openapi_tags=tags_metadata,
    )

    # Configure CORS
    # Browser form clients only need to POST JSON
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", ERROR_CODE_HEADER],
    )

    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(RequestLoggingMiddleware)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handle HTTP exceptions.

        Errors raised with an X-Error-Code header also carry the code in the
        body, so clients can branch on it without parsing the message.
        """
        content = {"detail": exc.detail}
        headers = getattr(exc, "headers", None)
        if headers and ERROR_CODE_HEADER in headers:
            content["code"] = headers[ERROR_CODE_HEADER]

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """
        Handle request validation errors.
        """
        # Pydantic error dicts may hold non-JSON values under "ctx"
        errors = [
            {
                "loc": list(error.get("loc", ())),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            for error in exc.errors()
        ]

        logger.info(
            f"Request validation failed: {len(errors)} error(s)",
            extra={"method": request.method, "path": str(request.url.path)},
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Generates a unique error_id (UUID) for each exception so a report
        from a client can be matched to the logged traceback.
        """
        error_id = str(uuid.uuid4())

        logger.exception(
            f"Unhandled exception [error_id={error_id}]: {exc}",
            extra={
                "error_id": error_id,
                "method": request.method,
                "path": str(request.url.path),
            },
        )

        # Don't leak internal details
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": ErrorMessages.INTERNAL_ERROR,
                "error_id": error_id,
            },
        )

    return app


app = create_application()


@app.get("/")
async def root():
    """Point clients at the API docs."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
