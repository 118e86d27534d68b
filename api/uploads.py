"""
ProposalGen Upload Validation

Size, emptiness and magic-byte checks for documents posted to /api/extract.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from core.exceptions import UploadValidationError
from core.models import UploadedDocument

logger = logging.getLogger(__name__)


# Allowed file extensions and their MIME types
ALLOWED_EXTENSIONS = {
    ".pdf": ["application/pdf"],
    ".docx": ["application/vnd.openxmlformats-officedocument.wordprocessingml.document"],
}

# Magic bytes signatures for file type validation
FILE_SIGNATURES = {
    ".pdf": [b"%PDF"],
    ".docx": [b"PK\x03\x04"],  # ZIP-based format
}

MISSING_FILE_MESSAGE = "file is required (field name: file)"


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal and other attacks.
    """
    if not filename:
        return "unnamed_file"

    filename = os.path.basename(filename).replace("\x00", "")
    filename = re.sub(r'[<>:"/\\|?*]', "_", filename)

    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[:255 - len(ext)] + ext

    if not filename or filename in (".", ".."):
        filename = "unnamed_file"

    return filename


def _detect_extension(content: bytes, filename: str) -> Optional[str]:
    ext = Path(filename).suffix.lower()
    if ext in FILE_SIGNATURES:
        return ext if any(content.startswith(sig) for sig in FILE_SIGNATURES[ext]) else None
    for candidate, signatures in FILE_SIGNATURES.items():
        if any(content.startswith(sig) for sig in signatures):
            return candidate
    return None


async def read_upload(file: Optional[UploadFile], max_size: int) -> UploadedDocument:
    """
    Read and validate an uploaded document.

    Raises:
        UploadValidationError: 400 for a missing, empty or unsupported file,
            413 when it exceeds max_size
    """
    if file is None:
        raise UploadValidationError(MISSING_FILE_MESSAGE)

    safe_filename = sanitize_filename(file.filename or "")
    content = await file.read()

    if len(content) > max_size:
        size_mb = len(content) / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        raise UploadValidationError(
            f"File size ({size_mb:.1f} MB) exceeds maximum allowed size ({max_mb:.0f} MB)",
            status_code=413,
        )

    if len(content) == 0:
        raise UploadValidationError("Empty files are not allowed")

    ext = _detect_extension(content, safe_filename)
    if ext is None:
        raise UploadValidationError("Unsupported file type. Only PDF/DOCX allowed.")

    # Be lenient with MIME types as browsers can be inconsistent
    if file.content_type and file.content_type not in ALLOWED_EXTENSIONS[ext]:
        logger.warning(
            f"MIME type mismatch: got {file.content_type}, expected one of {ALLOWED_EXTENSIONS[ext]}",
            extra={"filename": safe_filename},
        )

    return UploadedDocument(
        filename=safe_filename,
        content=content,
        content_type=ALLOWED_EXTENSIONS[ext][0],
    )
