"""
Funnel.vc Database Models
SQLAlchemy ORM models for founder and VC profiles.
"""
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class User(Base):
    """
    User accounts provisioned by the identity service.

    Only the identity reference and role live here; credentials and sessions
    are owned by the identity service.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="Unique identifier for the user (token subject)",
    )
    email: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        doc="User email address",
    )
    name: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Display name",
    )
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="founder",
        doc="Marketplace role: 'founder' or 'vc'",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        doc="Account creation timestamp",
    )

    founder_profile: Mapped[Optional["FounderProfile"]] = relationship(
        "FounderProfile",
        back_populates="user",
        uselist=False,
    )
    vc_profile: Mapped[Optional["VCProfile"]] = relationship(
        "VCProfile",
        back_populates="user",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class FounderProfile(Base):
    """
    Startup profile submitted by a founder.

    One row per user. Re-submitting replaces every field in place.
    """

    __tablename__ = "founder_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        doc="Owning user",
    )
    startup_name: Mapped[str] = mapped_column(Text, nullable=False)
    sector: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="One value from the shared sector taxonomy",
    )
    ask_amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Funding ask in whole USD",
    )
    deck_link: Mapped[str] = mapped_column(Text, nullable=False)
    deck_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Full text extracted from the pitch deck",
    )
    deck_pages: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    general_analysis: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
        doc="Deck report card: strengths, weaknesses, viability_score, summary",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user: Mapped["User"] = relationship("User", back_populates="founder_profile")

    __table_args__ = (
        CheckConstraint("ask_amount > 0", name="ck_founder_profiles_ask_positive"),
    )

    def __repr__(self) -> str:
        return f"<FounderProfile(id={self.id}, startup='{self.startup_name}', sector='{self.sector}')>"


class VCProfile(Base):
    """
    Investor profile with a public thesis page.

    ``sectors`` holds a JSON-encoded list of taxonomy values. It is stored as
    text, and rows written by older clients may not parse; readers must
    handle that.
    """

    __tablename__ = "vc_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        doc="Owning user",
    )
    firm_name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        doc="URL-safe public handle",
    )
    thesis: Mapped[str] = mapped_column(Text, nullable=False)
    sectors: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="JSON array of taxonomy sectors",
    )
    min_check: Mapped[int] = mapped_column(Integer, nullable=False)
    max_check: Mapped[int] = mapped_column(Integer, nullable=False)
    monday_board_id: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Monday.com board receiving matched pitches",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user: Mapped["User"] = relationship("User", back_populates="vc_profile")

    __table_args__ = (
        CheckConstraint("min_check <= max_check", name="ck_vc_profiles_check_range"),
        Index("ix_vc_profiles_check_range", "min_check", "max_check"),
    )

    def __repr__(self) -> str:
        return f"<VCProfile(id={self.id}, firm='{self.firm_name}', slug='{self.slug}')>"
