"""
Extraction Routes

- POST /api/extract  multipart "file" (PDF/DOCX) -> {"result": [addresses]}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from api.config import Settings
from api.dependencies import get_address_extractor, get_app_settings
from api.schemas import ExtractResponse
from api.uploads import read_upload
from core.address import NO_ADDRESS_MESSAGE
from core.exceptions import AddressExtractionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Extraction"])


@router.post("/extract", response_model=ExtractResponse)
async def extract(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_app_settings),
    extractor=Depends(get_address_extractor),
):
    """
    Candidate project addresses found in the document, most likely first.

    404 when nothing is found, 502 when the extraction model answers with
    something unusable.
    """
    document = await read_upload(file, settings.max_file_size)
    candidates = await extractor.extract_candidates(document)

    if not candidates:
        raise AddressExtractionError(NO_ADDRESS_MESSAGE)

    logger.info(f"Extracted {len(candidates)} candidate address(es) from {document.filename}")
    return {"result": candidates}
