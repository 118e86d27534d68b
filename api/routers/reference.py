"""
Reference Data and Health Routes

- GET /api/mandates  mandate catalog for the fee builder
- GET /api/services  optional proposal services
- GET /api/health    liveness plus bio store status
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Request

from api.schemas import MandateResponse, ServiceResponse
from core.assembly import SERVICE_OPTIONS
from core.models import MANDATES
from database.connection import health_check as database_health

router = APIRouter(prefix="/api", tags=["Reference"])


@router.get("/mandates", response_model=List[MandateResponse])
async def list_mandates():
    return [mandate.to_dict() for mandate in MANDATES]


@router.get("/services", response_model=List[ServiceResponse])
async def list_services():
    return [{"id": service, "label": label} for service, label in SERVICE_OPTIONS.items()]


@router.get("/health", tags=["Health"])
async def health(request: Request):
    state = request.app.state
    database = await database_health(getattr(state, "db_engine", None))
    return {
        "status": database["status"],
        "timestamp": datetime.now().isoformat(),
        "version": state.settings.api_version,
        "environment": state.settings.environment,
        "components": {
            "database": database["database"],
            "bio_repository": type(state.bio_repository).__name__,
            "address_extractor": type(state.address_extractor).__name__,
            "template": "ready" if state.settings.template_path.exists() else "missing",
        },
    }
