"""
ProposalGen Document Parser
Text extraction from uploaded PDF and DOCX documents

Only the first pages of a PDF are read: project addresses sit on the cover
or the first pages of a drawing set / report.
"""

import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from docx import Document
from pypdf import PdfReader, PdfWriter

logger = logging.getLogger(__name__)


PDF_MAGIC = b"%PDF"
ZIP_MAGIC = b"PK\x03\x04"
DEFAULT_MAX_PAGES = 3


class DocumentType(str, Enum):
    """Supported upload types."""
    PDF = "pdf"
    DOCX = "docx"
    UNKNOWN = "unknown"


def detect_type(content: bytes, filename: str = "") -> DocumentType:
    """Sniff the document type from magic bytes, then the file extension."""
    if content.startswith(PDF_MAGIC):
        return DocumentType.PDF
    if content.startswith(ZIP_MAGIC) and Path(filename).suffix.lower() in (".docx", ""):
        return DocumentType.DOCX
    return DocumentType.UNKNOWN


@dataclass
class ParsedDocument:
    """Text pulled from an upload, one entry per page (or one for DOCX)."""
    filename: str
    doc_type: DocumentType
    total_pages: int
    pages: List[str] = field(default_factory=list)

    @property
    def full_text(self) -> str:
        return "\n\n".join(page for page in self.pages if page)


class DocumentParser:
    """
    Reads text from PDF and DOCX uploads.

    PDFs are limited to the first max_pages pages; DOCX files are read in
    full (paragraphs, then tables).
    """

    def __init__(self, max_pages: int = DEFAULT_MAX_PAGES):
        self.max_pages = max_pages

    def parse_bytes(self, content: bytes, filename: str) -> ParsedDocument:
        doc_type = detect_type(content, filename)
        if doc_type == DocumentType.PDF:
            return self._parse_pdf_bytes(content, filename)
        if doc_type == DocumentType.DOCX:
            return self._parse_docx_bytes(content, filename)
        raise ValueError(f"Unsupported document type: {filename}")

    def parse(self, file_path: str) -> ParsedDocument:
        path = Path(file_path)
        return self.parse_bytes(path.read_bytes(), path.name)

    def _parse_pdf_bytes(self, content: bytes, filename: str) -> ParsedDocument:
        reader = PdfReader(io.BytesIO(content))
        pages = []
        for page in reader.pages[:self.max_pages]:
            pages.append((page.extract_text() or "").strip())

        logger.debug(f"Read {len(pages)} of {len(reader.pages)} pages from {filename}")
        return ParsedDocument(
            filename=filename,
            doc_type=DocumentType.PDF,
            total_pages=len(reader.pages),
            pages=pages,
        )

    def _parse_docx_bytes(self, content: bytes, filename: str) -> ParsedDocument:
        doc = Document(io.BytesIO(content))
        parts = [para.text for para in doc.paragraphs if para.text.strip()]

        for table in doc.tables:
            table_text = self._extract_table_text(table)
            if table_text:
                parts.append(table_text)

        return ParsedDocument(
            filename=filename,
            doc_type=DocumentType.DOCX,
            total_pages=1,
            pages=["\n".join(parts)],
        )

    def _extract_table_text(self, table) -> str:
        """Extract text from a DOCX table."""
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append("\t".join(cells))
        return "\n".join(rows)


def first_pages_pdf(content: bytes, max_pages: int = DEFAULT_MAX_PAGES) -> bytes:
    """
    Copy of a PDF holding only its first max_pages pages.

    Returns the input unchanged when it is already short enough.
    """
    reader = PdfReader(io.BytesIO(content))
    if len(reader.pages) <= max_pages:
        return content

    writer = PdfWriter()
    for page in reader.pages[:max_pages]:
        writer.add_page(page)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


# Convenience function
def parse_document(file_path: str, max_pages: Optional[int] = None) -> ParsedDocument:
    """Parse a document from disk."""
    parser = DocumentParser(max_pages or DEFAULT_MAX_PAGES)
    return parser.parse(file_path)
