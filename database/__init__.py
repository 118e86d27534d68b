# ProposalGen Database Layer
# PostgreSQL storage for staff bios

from database.connection import (
    create_engine,
    create_session_factory,
    health_check,
    normalize_database_url,
)
from database.models import Base, BioRecord, SCHEMA
from database.repositories import (
    BaseBioRepository,
    InMemoryBioRepository,
    SQLBioRepository,
)

__all__ = [
    "create_engine",
    "create_session_factory",
    "health_check",
    "normalize_database_url",
    "Base",
    "BioRecord",
    "SCHEMA",
    "BaseBioRepository",
    "InMemoryBioRepository",
    "SQLBioRepository",
]
