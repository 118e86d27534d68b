"""
ProposalGen API Dependencies

Collaborators are built once by create_app() and kept on app.state; these
getters hand them to route handlers through FastAPI's Depends().
"""

from fastapi import Request

from api.config import Settings
from database.repositories import BaseBioRepository
from tools.docx_renderer import DocxRenderer
from tools.pdf_renderer import PdfRenderer


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_bio_repository(request: Request) -> BaseBioRepository:
    return request.app.state.bio_repository


def get_address_extractor(request: Request):
    return request.app.state.address_extractor


def get_places_client(request: Request):
    return request.app.state.places_client


def get_pdf_renderer(request: Request) -> PdfRenderer:
    return request.app.state.pdf_renderer


def get_docx_renderer(request: Request) -> DocxRenderer:
    return request.app.state.docx_renderer
