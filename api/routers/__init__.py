"""
ProposalGen API Routers

Modular API routers for the document, bio, places, extraction and
reference endpoints.
"""

from .bios import router as bios_router
from .extract import router as extract_router
from .places import router as places_router
from .proposals import router as proposals_router
from .reference import router as reference_router

__all__ = [
    "bios_router",
    "extract_router",
    "places_router",
    "proposals_router",
    "reference_router",
]
