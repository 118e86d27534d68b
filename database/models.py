"""
ProposalGen Database Models
SQLAlchemy async models for the proposal generator schema
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from core.models import Bio

SCHEMA = "proposal_generator"


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class BioRecord(Base):
    """Staff biography included in the team section of a proposal."""
    __tablename__ = "bios"
    __table_args__ = (
        Index("idx_bios_name", "name"),
        {"schema": SCHEMA},
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry_experience: Mapped[str] = mapped_column(Text, nullable=False, default="")
    accreditations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_domain(self) -> Bio:
        return Bio(
            id=str(self.id),
            name=self.name,
            industry_experience=self.industry_experience or "",
            accreditations=self.accreditations,
        )

    def __repr__(self) -> str:
        return f"<BioRecord id={self.id!r} name={self.name!r}>"
