"""
Matching Agent Module
Founder-to-VC matching: hard filter on check size and sector, LLM re-ranking.
"""
from .matcher import (
    CandidateMatcher,
    MalformedSectorsError,
    filter_by_sector,
    parse_sectors,
)
from .models import (
    CandidateScore,
    DeckAnalysis,
    FounderContext,
    MatchResult,
    PitchAnalysis,
    PitchVerdict,
    RankingResponse,
    VCCandidate,
)
from .oracle import AnthropicRankingOracle, RankingOracle, RankingOracleError
from .ranker import FALLBACK_RATIONALE, CandidateRanker

__all__ = [
    # Matcher
    "CandidateMatcher",
    "MalformedSectorsError",
    "filter_by_sector",
    "parse_sectors",
    # Ranker
    "CandidateRanker",
    "FALLBACK_RATIONALE",
    # Oracle
    "AnthropicRankingOracle",
    "RankingOracle",
    "RankingOracleError",
    # Models
    "CandidateScore",
    "DeckAnalysis",
    "FounderContext",
    "MatchResult",
    "PitchAnalysis",
    "PitchVerdict",
    "RankingResponse",
    "VCCandidate",
]
