"""
Founder profile schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field, HttpUrl, field_validator

from agents.matching.models import CamelModel, DeckAnalysis
from funnel.constants import MAX_AMOUNT, is_known_sector


class FounderProfileCreate(CamelModel):
    """
    Founder profile submission.

    Sent as JSON or as multipart form fields. ``deckLink`` is required for
    JSON submissions; multipart submissions carry the deck as ``file``.
    """

    startup_name: str = Field(..., min_length=1, max_length=200, description="Startup name")
    sector: str = Field(..., description="One sector from the taxonomy")
    ask_amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Funding ask in USD")
    deck_link: Optional[HttpUrl] = Field(None, description="Public URL of the pitch deck PDF")

    @field_validator("startup_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Startup name is required")
        return value

    @field_validator("sector")
    @classmethod
    def sector_in_taxonomy(cls, value: str) -> str:
        if not is_known_sector(value):
            raise ValueError(f"Unknown sector: {value}")
        return value


class FounderProfileResponse(CamelModel):
    """Founder profile as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Profile ID")
    user_id: UUID = Field(..., description="Owner ID")
    startup_name: str
    sector: str
    ask_amount: int
    deck_link: str
    deck_pages: Optional[int] = None
    general_analysis: Optional[DeckAnalysis] = Field(None, description="Deck report card")
    created_at: datetime
    updated_at: datetime


class ProfileSubmitted(CamelModel):
    """Acknowledgement for a profile submission."""

    message: str
    profile_id: UUID
    analyzed: bool = Field(..., description="Whether a deck analysis was stored")
