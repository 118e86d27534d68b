# ProposalGen Parsing Layer
# Text extraction from uploaded documents

from parsing.document_parser import (
    DocumentParser,
    DocumentType,
    ParsedDocument,
    detect_type,
    first_pages_pdf,
)

__all__ = [
    "DocumentParser",
    "DocumentType",
    "ParsedDocument",
    "detect_type",
    "first_pages_pdf",
]
