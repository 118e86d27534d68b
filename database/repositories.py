"""
ProposalGen Database Repositories
Data access layer for the bio store
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from core.exceptions import BioStoreError
from core.models import Bio
from database.models import BioRecord

logger = logging.getLogger(__name__)


class BaseBioRepository(ABC):
    """Read access to staff bios."""

    @abstractmethod
    async def list_bios(self) -> List[Bio]:
        """All bios ordered by name."""

    @abstractmethod
    async def find_bios_by_ids(self, ids: Sequence[str]) -> List[Bio]:
        """Bios whose id is in ids; order is unspecified, unknown ids are skipped."""


# ============================================
# SQL Repository
# ============================================

class SQLBioRepository(BaseBioRepository):
    """Bios stored in proposal_generator.bios."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def list_bios(self) -> List[Bio]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(BioRecord).order_by(BioRecord.name.asc())
                )
                return [record.to_domain() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Database query error: {e}")
            raise BioStoreError(str(e) or "Unknown error occurred while fetching data") from e

    async def find_bios_by_ids(self, ids: Sequence[str]) -> List[Bio]:
        if not ids:
            return []
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(BioRecord).where(BioRecord.id.in_(list(ids)))
                )
                return [record.to_domain() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Database query error: {e}")
            raise BioStoreError(str(e) or "Unknown error occurred while fetching data") from e


# ============================================
# In-Memory Repository
# ============================================

class InMemoryBioRepository(BaseBioRepository):
    """Bios held in a dict; used in development without DATABASE_URL and in tests."""

    def __init__(self, bios: Iterable[Bio] = ()):
        self._bios: Dict[str, Bio] = {bio.id: bio for bio in bios}

    def add(self, bio: Bio) -> None:
        self._bios[bio.id] = bio

    async def list_bios(self) -> List[Bio]:
        return sorted(self._bios.values(), key=lambda bio: bio.name)

    async def find_bios_by_ids(self, ids: Sequence[str]) -> List[Bio]:
        wanted = set(ids)
        return [bio for bio in self._bios.values() if bio.id in wanted]
