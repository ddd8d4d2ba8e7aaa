"""
Pitch submission schemas.
"""

from uuid import UUID

from pydantic import Field, HttpUrl

from agents.matching.models import CamelModel, PitchAnalysis


class PitchRequest(CamelModel):
    """Pitch the caller's startup to one VC."""

    vc_id: UUID = Field(..., description="Target VC profile ID")
    deck_link: HttpUrl = Field(..., description="Deck being pitched")


class PitchDecision(CamelModel):
    """Verdict for one founder and VC pair. Never stored."""

    vc_id: UUID
    is_match: bool
    memo: str
    analysis: PitchAnalysis = Field(default_factory=PitchAnalysis)
    crm_sync_requested: bool = Field(False, description="Whether a CRM notification was queued")
