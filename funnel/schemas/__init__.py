"""
Funnel.vc Pydantic Schemas
Request/Response models for API endpoints.
"""
from funnel.schemas.matches import MatchList
from funnel.schemas.pitch import PitchDecision, PitchRequest
from funnel.schemas.profile import (
    FounderProfileCreate,
    FounderProfileResponse,
    ProfileSubmitted,
)
from funnel.schemas.vc import VCProfileCreate, VCProfileCreated, VCPublicProfile

__all__ = [
    "FounderProfileCreate",
    "FounderProfileResponse",
    "MatchList",
    "PitchDecision",
    "PitchRequest",
    "ProfileSubmitted",
    "VCProfileCreate",
    "VCProfileCreated",
    "VCPublicProfile",
]
