"""
Bio Routes

- GET /api/bios  staff bios for the team multi-select, ordered by name
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_bio_repository
from api.schemas import BioResponse
from database.repositories import BaseBioRepository

router = APIRouter(prefix="/api", tags=["Bios"])


@router.get("/bios", response_model=List[BioResponse])
async def list_bios(repository: BaseBioRepository = Depends(get_bio_repository)):
    bios = await repository.list_bios()
    return [bio.to_dict() for bio in bios]
