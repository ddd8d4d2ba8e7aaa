"""
Match API Endpoints
Ranked VC matches for the calling founder.
"""

import logging

from fastapi import APIRouter

from agents.matching.matcher import CandidateMatcher
from agents.matching.ranker import CandidateRanker
from funnel.api.deps import CurrentContext, OracleDep, ProfileStoreDep
from funnel.schemas.matches import MatchList

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["Matches"])


@router.get(
    "",
    response_model=MatchList,
    summary="List matches",
    description="VCs whose check size and sectors fit the founder, ranked by thesis fit.",
)
async def list_matches(
    ctx: CurrentContext,
    store: ProfileStoreDep,
    oracle: OracleDep,
) -> MatchList:
    """
    Get ranked matches for the authenticated founder.

    Returns an empty list when the caller has no founder profile. Oracle
    failures degrade to a uniform score rather than an error.
    """
    founder = await store.find_founder_profile(ctx, ctx.user_id)
    if founder is None:
        return MatchList(matches=[])

    candidates = await CandidateMatcher(store).find_candidates(ctx, founder)
    matches = await CandidateRanker(oracle).rank_candidates(founder, candidates)

    logger.info(f"Returning {len(matches)} matches for founder profile {founder.id}")
    return MatchList(matches=matches)
