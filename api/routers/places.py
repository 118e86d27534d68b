"""
Places Routes

- GET /api/map-places?input=  address autocomplete proxy (Google Places)
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_places_client

router = APIRouter(prefix="/api", tags=["Places"])

MISSING_INPUT_MESSAGE = "Query parameter 'input' is required and must be a string."


@router.get("/map-places")
async def map_places(input: Optional[str] = None, places=Depends(get_places_client)):
    """Returns the upstream autocomplete JSON unchanged."""
    if input is None:
        return JSONResponse(status_code=400, content={"error": MISSING_INPUT_MESSAGE})
    return await places.autocomplete(input)
