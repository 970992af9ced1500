"""
School Models

Canonical school records. Schools are imported in bulk or created when an
admin approves a community school submission.
"""

import uuid
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column

from uniform_exchange.modules.shared import BaseModel


class SchoolLevel(str, Enum):
    """Education level of a school."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIXED = "mixed"


class School(BaseModel):
    """
    School model.

    Listings, requests and user profiles reference schools by id.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    address: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Location
    county_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("counties.id"),
        nullable=False,
        index=True,
    )
    locality_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("localities.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    level: Mapped[SchoolLevel] = mapped_column(
        ENUM(
            SchoolLevel,
            name="school_level",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    # Contact information
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Submission this school was created from, if any
    # ON DELETE SET NULL: the school outlives its submission
    submission_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("school_submissions.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name}, level={self.level.value})>"
