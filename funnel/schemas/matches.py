"""
Match schemas.
"""

from pydantic import Field

from agents.matching.models import CamelModel, MatchResult


class MatchList(CamelModel):
    """Ranked VCs for the calling founder."""

    matches: list[MatchResult] = Field(default_factory=list, description="Best fit first")
