"""
Document Generation Routes

- POST /api/generate-pdf       project summary (PDF)
- POST /api/generate-proposal  full proposal (DOCX)
"""

import asyncio
import logging
import re

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.dependencies import get_bio_repository, get_docx_renderer, get_pdf_renderer
from api.schemas import GeneratePdfRequest, GenerateProposalRequest
from core.assembly import assemble
from core.bios import resolve_from_repository
from core.models import FeeSummary
from core.validation import DocumentTarget, check_mandates, gate_submission
from database.repositories import BaseBioRepository
from tools.docx_renderer import DocxRenderer
from tools.pdf_renderer import PdfRenderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Documents"])

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def attachment(filename: str) -> str:
    """Content-Disposition value; quotes and line breaks are dropped from the name."""
    safe = re.sub(r'["\r\n]', "", filename)
    safe = safe.encode("latin-1", "replace").decode("latin-1")
    return f'attachment; filename="{safe}"'


def proposal_filename(project_name: str) -> str:
    return f"proposal-{re.sub(r'[^a-z0-9]', '_', project_name, flags=re.IGNORECASE)}.docx"


@router.post("/generate-pdf")
async def generate_pdf(
    body: GeneratePdfRequest,
    renderer: PdfRenderer = Depends(get_pdf_renderer),
):
    """Render the one-page project summary."""
    body.check_required()
    form = body.to_form()
    check_mandates(form.proposed_mandates)

    payload = assemble(form, form.address, form.fee or FeeSummary(), ())
    content = await asyncio.to_thread(renderer.render, payload.to_summary())

    logger.info(f"Generated project summary for '{payload.project_name}' ({len(content)} bytes)")
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": attachment(f"project-summary-{payload.project_name}.pdf")},
    )


@router.post("/generate-proposal")
async def generate_proposal(
    body: GenerateProposalRequest,
    repository: BaseBioRepository = Depends(get_bio_repository),
    renderer: DocxRenderer = Depends(get_docx_renderer),
):
    """Render the full DOCX proposal from the template."""
    bios = await resolve_from_repository(repository, body.bios)
    form = body.to_form(list(bios))

    gate_submission(form, form.address, DocumentTarget.PROPOSAL)
    check_mandates(form.proposed_mandates)

    payload = assemble(form, form.address, form.fee or FeeSummary(), bios)
    content = await asyncio.to_thread(renderer.render, payload)

    logger.info(
        f"Generated proposal for '{payload.project_name}' "
        f"({len(payload.bios)} bios, services={list(payload.list_of_services)})"
    )
    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": attachment(proposal_filename(payload.project_name))},
    )
