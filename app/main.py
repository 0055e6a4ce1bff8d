"""Chat Sessions API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the chat backend.
"""

import json
import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import LogFormatEnum, Settings, settings
from app.database import engine, ping_database
from models import Base

logger = logging.getLogger(__name__)

SIMPLE_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonLogFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def build_log_formatter(app_settings: Settings = settings) -> logging.Formatter:
    if app_settings.log_format == LogFormatEnum.json:
        return JsonLogFormatter()
    return logging.Formatter(SIMPLE_LOG_FORMAT)


def setup_logging(app_settings: Settings = settings):
    """Configure root logging from settings."""
    handler = logging.StreamHandler()
    handler.setFormatter(build_log_formatter(app_settings))
    logging.basicConfig(level=app_settings.log_level.value, handlers=[handler])


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    # Startup
    logger.info(f"Starting {settings.app_name} ({settings.environment.value})...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")

    if not settings.has_ai_enabled:
        logger.warning("GEMINI_API_KEY is not set; chat messages will fail until it is configured")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await engine.dispose()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-user chat sessions backed by a hosted language model",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url="/redoc" if settings.environment == "development" else None,
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {message}")

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "message": message,
                "error_code": error_code,
                "details": details,
                "timestamp": datetime.utcnow().isoformat(),
                "request_id": getattr(request.state, "request_id", None),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            # Handle custom input if present
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "message": "Validation error",
                "error_code": "VALIDATION_ERROR",
                "details": errors,
                "timestamp": datetime.utcnow().isoformat(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.chat.controller import router as chat_router
    from app.domains.user.controller import router as user_router
    from app.services.model_provider import ChatProvider, get_chat_provider

    # Health check endpoint
    @app.get("/health")
    async def health_check(provider: ChatProvider = Depends(get_chat_provider)):
        """Report database and model provider status."""
        db_status = "healthy"
        try:
            await ping_database()
        except Exception as e:
            logger.warning(f"Database health check failed: {str(e)}")
            db_status = "unhealthy"

        provider_status = provider.status()
        ai_status = "healthy" if provider_status["configured"] else "not_configured"

        return {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment,
            "timestamp": datetime.utcnow().isoformat(),
            "services": {
                "database": db_status,
                "ai_service": ai_status,
            },
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": "Chat sessions with a hosted language model",
            "docs_url": "/docs" if settings.environment == "development" else None,
        }

    # Include domain routers
    app.include_router(user_router)
    app.include_router(chat_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
