"""
User Models

Identity records mirrored from the auth provider, plus the marketplace
profile that tracks which schools a user is associated with.
"""

import uuid
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import ENUM, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from uniform_exchange.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    ADMIN = "admin"
    USER = "user"


class User(BaseModel):
    """
    User identity.

    Authentication happens at the auth provider; this table holds what the
    API needs to address notifications and check roles.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        ENUM(
            UserRole,
            name="user_role",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    profile: Mapped["UserProfile | None"] = relationship(
        "UserProfile",
        back_populates="user",
        uselist=False,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def display_name(self) -> str:
        """Name for greetings, falling back to the email address."""
        return self.name or self.email


class UserProfile(BaseModel):
    """
    Marketplace profile.

    additional_schools is a JSON array of school id strings the user has been
    approved for on top of their primary school.
    """

    __tablename__ = "user_profiles"

    # ON DELETE CASCADE: the profile goes with the user
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    primary_school_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    additional_schools: Mapped[list | None] = mapped_column(
        JSONB,
        nullable=True,
    )
    locality_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("localities.id", ondelete="SET NULL"),
        nullable=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")

    @property
    def school_ids(self) -> list[str]:
        """Primary school followed by additional schools, as id strings."""
        ids: list[str] = []
        if self.primary_school_id:
            ids.append(str(self.primary_school_id))
        if self.additional_schools:
            ids.extend(str(school_id) for school_id in self.additional_schools)
        return ids
