"""
Matching Agent Pydantic Models
Data models for the founder-to-VC matching engine.
"""
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FounderContext(BaseModel):
    """
    Bounded description of a founder sent to the ranking oracle.

    Contains identity fields plus a short summary: the deck analysis summary
    when one exists, otherwise an excerpt of the raw deck text.
    """

    founder_id: UUID = Field(..., description="Founder profile identifier")
    startup_name: str = Field(..., description="Startup name")
    sector: str = Field(..., description="Taxonomy sector")
    ask_amount: int = Field(..., gt=0, description="Funding ask in USD")
    summary: Optional[str] = Field(default=None, description="Analysis summary")
    deck_excerpt: Optional[str] = Field(default=None, description="Leading deck text")

    @classmethod
    def from_profile(cls, profile: Any, excerpt_chars: int = 1000) -> "FounderContext":
        """
        Build context from a FounderProfile row.

        Args:
            profile: FounderProfile ORM instance.
            excerpt_chars: Maximum deck characters used when no summary exists.
        """
        analysis = profile.general_analysis if isinstance(profile.general_analysis, dict) else {}
        summary = analysis.get("summary") or None
        excerpt = None
        if not summary and profile.deck_text:
            excerpt = profile.deck_text[:excerpt_chars]

        return cls(
            founder_id=profile.id,
            startup_name=profile.startup_name,
            sector=profile.sector,
            ask_amount=profile.ask_amount,
            summary=summary,
            deck_excerpt=excerpt,
        )

    def to_prompt_text(self) -> str:
        text = f"Name: {self.startup_name}, Sector: {self.sector}, Ask: ${self.ask_amount}."
        if self.summary:
            text += f"\nSummary: {self.summary}"
        elif self.deck_excerpt:
            text += f"\nDeck Excerpt: {self.deck_excerpt}..."
        return text


class VCCandidate(BaseModel):
    """A VC that passed the hard filter."""

    vc_id: UUID = Field(..., description="VC profile identifier")
    slug: str
    firm_name: str
    thesis: str
    sectors: list[str] = Field(default_factory=list)
    min_check: int
    max_check: int
    monday_board_id: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Any, sectors: list[str]) -> "VCCandidate":
        return cls(
            vc_id=profile.id,
            slug=profile.slug,
            firm_name=profile.firm_name,
            thesis=profile.thesis,
            sectors=sectors,
            min_check=profile.min_check,
            max_check=profile.max_check,
            monday_board_id=profile.monday_board_id,
        )

    def to_prompt_text(self) -> str:
        return f"ID: {self.vc_id}\nFirm: {self.firm_name}\nThesis: {self.thesis}\n"


class CandidateScore(BaseModel):
    """Oracle score for one candidate."""

    vc_id: str = Field(..., description="Candidate ID exactly as provided")
    score: float = Field(..., ge=0.0, le=100.0, description="Thesis fit from 0-100")
    reason: str = Field(..., description="Brief explanation of the fit or misalignment")


class RankingResponse(BaseModel):
    """Required output schema for a ranking call."""

    rankings: list[CandidateScore] = Field(
        ...,
        description="One entry per candidate VC",
    )


class MatchResult(CamelModel):
    """
    A ranked VC for a founder.

    Produced per request and never stored.
    """

    vc_id: UUID
    slug: str
    firm_name: str
    thesis: str
    sectors: list[str] = Field(default_factory=list)
    min_check: int
    max_check: int
    score: float = Field(..., ge=0.0, le=100.0)
    rationale: Optional[str] = None

    @classmethod
    def from_candidate(
        cls,
        candidate: VCCandidate,
        score: float,
        rationale: Optional[str] = None,
    ) -> "MatchResult":
        return cls(
            vc_id=candidate.vc_id,
            slug=candidate.slug,
            firm_name=candidate.firm_name,
            thesis=candidate.thesis,
            sectors=candidate.sectors,
            min_check=candidate.min_check,
            max_check=candidate.max_check,
            score=score,
            rationale=rationale,
        )


class PitchAnalysis(CamelModel):
    """Strengths and weaknesses of one founder/VC pairing."""

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class PitchVerdict(CamelModel):
    """Required output schema for a pitch judgement."""

    is_match: bool = Field(..., description="True if there's a strong fit, false otherwise")
    memo: str = Field(..., description="Concise 1-2 sentence explanation of the decision")
    analysis: PitchAnalysis = Field(default_factory=PitchAnalysis)


class DeckAnalysis(CamelModel):
    """Required output schema for a deck report card."""

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    viability_score: float = Field(..., ge=0.0, le=100.0)
    summary: str
