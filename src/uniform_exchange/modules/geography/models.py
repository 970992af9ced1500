"""
Geography Models

Counties and localities used to place schools and scope duplicate detection.
"""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from uniform_exchange.modules.shared import BaseModel


class County(BaseModel):
    """A county (top-level geographic area)."""

    __tablename__ = "counties"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    osm_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    localities: Mapped[list["Locality"]] = relationship(
        "Locality",
        back_populates="county",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<County(id={self.id}, name={self.name})>"


class Locality(BaseModel):
    """A town or area within a county."""

    __tablename__ = "localities"

    name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    county_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("counties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    osm_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    county: Mapped["County"] = relationship("County", back_populates="localities")

    def __repr__(self) -> str:
        return f"<Locality(id={self.id}, name={self.name})>"
