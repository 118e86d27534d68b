"""
ProposalGen API
FastAPI backend for project summary and proposal generation

Endpoints:
- POST /api/generate-pdf - Project summary PDF
- POST /api/generate-proposal - Full proposal DOCX
- GET /api/bios - Staff bios ordered by name
- GET /api/map-places - Address autocomplete proxy
- POST /api/extract - Candidate project addresses from an uploaded document
- GET /api/mandates, /api/services - Form reference data
- GET /api/health - Health check
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.integrations.address_extractor import create_address_extractor
from agents.integrations.places_client import create_places_client
from api.config import DEFAULT_TEMPLATE_PATH, Settings, get_settings
from api.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from api.middleware.tracing import RequestIDFilter
from api.routers import (
    bios_router,
    extract_router,
    places_router,
    proposals_router,
    reference_router,
)
from api.schemas import error_body
from core.exceptions import ProposalError
from database.connection import create_engine, create_session_factory
from database.repositories import BaseBioRepository, InMemoryBioRepository, SQLBioRepository
from tools.docx_renderer import DocxRenderer, build_default_template
from tools.pdf_renderer import create_pdf_renderer


# ============== Structured Logging ==============

LOGGER_NAMESPACES = ("proposalgen", "api", "core", "database", "parsing", "agents", "tools")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging in production"""

    EXTRA_FIELDS = ("request_id", "endpoint", "method", "status_code", "duration_ms", "filename")

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in self.EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value not in (None, ""):
                log_data[name] = value

        return json.dumps(log_data)


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure logging based on environment"""
    settings = settings or get_settings()

    handler = logging.StreamHandler()
    handler.addFilter(RequestIDFilter())
    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        ))

    level = getattr(logging, settings.log_level, logging.INFO)
    for name in LOGGER_NAMESPACES:
        namespace_logger = logging.getLogger(name)
        namespace_logger.setLevel(level)
        namespace_logger.handlers = [handler]
        namespace_logger.propagate = False

    return logging.getLogger("proposalgen")


logger = logging.getLogger("proposalgen")


# ============== Exception Handlers ==============

def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:

    @app.exception_handler(ProposalError)
    async def proposal_error_handler(request: Request, exc: ProposalError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")

        stack = None
        if exc.status_code >= 500 and settings.debug:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                exc.error,
                exc.message,
                fields=getattr(exc, "fields", None),
                stack=stack,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in err["loc"] if part != "body") for err in exc.errors()]
        message = "; ".join(
            f"{field or 'body'}: {err['msg']}" for field, err in zip(fields, exc.errors())
        )
        return JSONResponse(
            status_code=400,
            content=error_body("Invalid request", message, fields=fields),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        stack = None
        if settings.debug:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(
            status_code=500,
            content=error_body("Service Error", str(exc) or type(exc).__name__, stack=stack),
        )


# ============== App Factory ==============

def create_app(
    settings: Optional[Settings] = None,
    bio_repository: Optional[BaseBioRepository] = None,
    address_extractor=None,
    places_client=None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Collaborators not passed in are built from settings: the SQL bio store
    when DATABASE_URL is set (in-memory otherwise), the Gemini or pattern
    address extractor, and the Google Places client.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="ProposalGen API",
        description="Project summary and proposal document generation",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.settings = settings
    app.state.db_engine = None

    if bio_repository is None:
        if settings.async_database_url:
            app.state.db_engine = create_engine(settings.async_database_url, echo=settings.db_echo)
            bio_repository = SQLBioRepository(create_session_factory(app.state.db_engine))
        else:
            logger.warning("DATABASE_URL not set. Using an empty in-memory bio store.")
            bio_repository = InMemoryBioRepository()

    app.state.bio_repository = bio_repository
    app.state.address_extractor = address_extractor or create_address_extractor(settings)
    app.state.places_client = places_client or create_places_client(settings)
    app.state.pdf_renderer = create_pdf_renderer()
    app.state.docx_renderer = DocxRenderer(settings.template_path)

    # CORS Configuration - Use environment variable in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production())
    app.add_middleware(RequestIDMiddleware)

    _register_exception_handlers(app, settings)

    app.include_router(proposals_router)
    app.include_router(bios_router)
    app.include_router(places_router)
    app.include_router(extract_router)
    app.include_router(reference_router)

    @app.on_event("startup")
    async def startup_event():
        logger.info("[Startup] ProposalGen starting...")
        logger.info(f"[Startup] Environment: {settings.environment}")
        logger.info(f"[Startup] Bio store: {type(app.state.bio_repository).__name__}")
        logger.info(f"[Startup] Address extractor: {type(app.state.address_extractor).__name__}")

        if not settings.template_path.exists():
            if settings.template_path == DEFAULT_TEMPLATE_PATH:
                build_default_template(settings.template_path)
                logger.info(f"[Startup] Wrote default proposal template to {settings.template_path}")
            else:
                logger.warning(f"[Startup] Proposal template not found: {settings.template_path}")

        logger.info("[Startup] Ready to serve requests")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("[Shutdown] ProposalGen shutting down...")
        if app.state.db_engine is not None:
            await app.state.db_engine.dispose()

    return app


setup_logging()
app = create_app()
