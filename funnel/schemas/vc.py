"""
VC profile schemas.
"""

from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from agents.matching.models import CamelModel
from funnel.constants import MAX_AMOUNT, SLUG_PATTERN, is_known_sector


class VCProfileCreate(CamelModel):
    """VC onboarding submission."""

    firm_name: str = Field(..., min_length=1, max_length=200, description="Firm name")
    thesis: str = Field(..., min_length=1, description="Investment thesis")
    sectors: list[str] = Field(..., min_length=1, description="Target sectors from the taxonomy")
    min_check: int = Field(..., ge=0, le=MAX_AMOUNT, description="Minimum check size in USD")
    max_check: int = Field(..., ge=0, le=MAX_AMOUNT, description="Maximum check size in USD")
    slug: str = Field(..., min_length=2, max_length=64, pattern=SLUG_PATTERN, description="Public URL handle")
    monday_board_id: Optional[str] = Field(None, max_length=64, description="Monday.com board for matched pitches")

    @field_validator("sectors")
    @classmethod
    def sectors_in_taxonomy(cls, value: list[str]) -> list[str]:
        unknown = [sector for sector in value if not is_known_sector(sector)]
        if unknown:
            raise ValueError(f"Unknown sectors: {', '.join(unknown)}")
        # Drop duplicates, keep first occurrence
        return list(dict.fromkeys(value))

    @field_validator("max_check")
    @classmethod
    def max_not_below_min(cls, value: int, info: ValidationInfo) -> int:
        min_check = info.data.get("min_check")
        if min_check is not None and value < min_check:
            raise ValueError("Maximum check size must be greater than or equal to minimum check size")
        return value

    @field_validator("monday_board_id")
    @classmethod
    def blank_board_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class VCProfileCreated(CamelModel):
    """Response for a successful VC onboarding."""

    slug: str


class VCPublicProfile(CamelModel):
    """Public thesis page data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    firm_name: str
    slug: str
    thesis: str
    sectors: list[str] = Field(default_factory=list)
    min_check: int
    max_check: int
