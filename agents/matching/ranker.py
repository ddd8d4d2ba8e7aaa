"""
Candidate Ranker
Orders hard-filtered VCs by thesis fit using the ranking oracle.
"""

import asyncio
from typing import Any, Optional

import structlog

from funnel.core.config import settings

from .models import CandidateScore, FounderContext, MatchResult, VCCandidate
from .oracle import RankingOracle

logger = structlog.get_logger(agent="ranker")

FALLBACK_RATIONALE = "Matches your sector and check size."


class CandidateRanker:
    """
    Ranking adapter around a RankingOracle.

    Owns truncation, merge-by-id and the degraded fallback so that the
    oracle stays a pure function of its inputs.
    """

    def __init__(
        self,
        oracle: RankingOracle,
        candidate_limit: Optional[int] = None,
        fallback_score: Optional[float] = None,
        excerpt_chars: Optional[int] = None,
    ):
        """
        Initialize ranker.

        Args:
            oracle: Oracle used for thesis-fit scoring.
            candidate_limit: Maximum candidates sent to the oracle.
            fallback_score: Uniform score used when the oracle fails.
            excerpt_chars: Deck excerpt length when no analysis summary exists.
        """
        self.oracle = oracle
        self.candidate_limit = candidate_limit or settings.ranking_candidate_limit
        self.fallback_score = (
            fallback_score if fallback_score is not None else settings.ranking_fallback_score
        )
        self.excerpt_chars = excerpt_chars or settings.founder_excerpt_chars

    def fallback(self, candidates: list[VCCandidate]) -> list[MatchResult]:
        """Every candidate at the uniform score, in hard-filter order."""
        return [
            MatchResult.from_candidate(candidate, self.fallback_score, FALLBACK_RATIONALE)
            for candidate in candidates
        ]

    @staticmethod
    def merge_scores(
        candidates: list[VCCandidate],
        scores: list[CandidateScore],
    ) -> list[MatchResult]:
        """
        Attach oracle scores to candidates by id.

        Candidates without a returned entry get score 0 and no rationale.
        Returned ids that match no candidate are ignored. If an id is
        returned twice, the first entry wins.
        """
        by_id: dict[str, CandidateScore] = {}
        for entry in scores:
            by_id.setdefault(entry.vc_id.strip().lower(), entry)

        results = []
        for candidate in candidates:
            entry = by_id.get(str(candidate.vc_id).lower())
            if entry is None:
                results.append(MatchResult.from_candidate(candidate, 0.0))
            else:
                results.append(MatchResult.from_candidate(candidate, entry.score, entry.reason))
        return results

    async def rank_candidates(self, founder: Any, candidates: list[VCCandidate]) -> list[MatchResult]:
        """
        Rank candidates for a founder.

        Args:
            founder: FounderProfile ORM instance.
            candidates: Hard-filter output, in store order.

        Returns:
            Match results sorted by score descending. Ties keep input order.
            Never raises on oracle failure.
        """
        if not candidates:
            return []

        sent = candidates[: self.candidate_limit]
        overflow = candidates[self.candidate_limit :]

        try:
            context = FounderContext.from_profile(founder, excerpt_chars=self.excerpt_chars)
            # A cancelled request does not cancel the oracle call; its result is dropped
            scores = await asyncio.shield(self.oracle.rank(context, sent))
        except Exception as e:
            logger.warning(
                "ranking_degraded",
                founder_id=str(founder.id),
                candidates=len(candidates),
                fallback_score=self.fallback_score,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self.fallback(candidates)

        results = self.merge_scores(sent, scores)
        results.extend(MatchResult.from_candidate(candidate, 0.0) for candidate in overflow)

        # sorted() is stable, so equal scores keep candidate order
        ranked = sorted(results, key=lambda result: result.score, reverse=True)

        logger.info(
            "ranking_complete",
            founder_id=str(founder.id),
            scored=len(scores),
            sent=len(sent),
            unscored_tail=len(overflow),
        )
        return ranked
