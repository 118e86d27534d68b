"""ProposalGen Tools - PDF and DOCX document renderers"""

from .pdf_renderer import PdfRenderer, create_pdf_renderer
from .docx_renderer import (
    DocxRenderer,
    build_default_template,
    create_docx_renderer,
    render_template,
)

__all__ = [
    "PdfRenderer",
    "create_pdf_renderer",
    "DocxRenderer",
    "build_default_template",
    "create_docx_renderer",
    "render_template",
]
