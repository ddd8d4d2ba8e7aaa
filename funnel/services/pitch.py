"""
Pitch Submission Workflow
One-shot fit check between the caller's startup and one VC.
"""
from typing import Any, Optional
from uuid import UUID

import structlog

from agents.matching.oracle import RankingOracle, RankingOracleError
from funnel.core.access import RequestContext, require_identity
from funnel.core.config import settings
from funnel.core.exceptions import UpstreamServiceError, ValidationError
from funnel.schemas.pitch import PitchDecision
from funnel.services.crm import CRMNotifier
from funnel.services.profile_store import ProfileStore

logger = structlog.get_logger(agent="pitch")

NO_CONTENT_MESSAGE = "No valid deck content found for pitching."


def build_pitch_content(founder: Any, max_chars: Optional[int] = None) -> str:
    """
    Founder text sent to the oracle.

    Prefers the deck analysis (summary, strengths, weaknesses); otherwise the
    stored deck text, truncated. Returns an empty string when neither exists.
    """
    max_chars = max_chars or settings.deck_analysis_chars
    analysis = founder.general_analysis
    if isinstance(analysis, dict) and analysis:
        strengths = ", ".join(analysis.get("strengths") or [])
        weaknesses = ", ".join(analysis.get("weaknesses") or [])
        return (
            f"Startup Summary: {analysis.get('summary') or ''}\n"
            f"Strengths: {strengths}\n"
            f"Weaknesses: {weaknesses}"
        )

    if founder.deck_text and founder.deck_text.strip():
        return founder.deck_text[:max_chars]

    return ""


class PitchWorkflow:
    """Validates a pitch with the oracle and notifies the VC's CRM on a match."""

    def __init__(self, store: ProfileStore, oracle: RankingOracle, notifier: CRMNotifier):
        self.store = store
        self.oracle = oracle
        self.notifier = notifier

    async def submit_pitch(
        self,
        ctx: RequestContext,
        vc_id: UUID,
        deck_link: Optional[str] = None,
    ) -> PitchDecision:
        """
        Pitch the caller's startup to one VC.

        Args:
            ctx: Caller context; the caller must own a founder profile.
            vc_id: Target VC profile.
            deck_link: Deck the founder pitched, forwarded to the CRM.

        Returns:
            The verdict, whether or not it is a match.

        Raises:
            NotFoundError: Founder or VC profile missing.
            ValidationError: The founder profile has no usable deck content.
            UpstreamServiceError: The oracle failed.
        """
        owner_id = require_identity(ctx)
        founder = await self.store.get_founder_profile(ctx, owner_id)

        content = build_pitch_content(founder)
        if not content:
            raise ValidationError(NO_CONTENT_MESSAGE)

        vc = await self.store.get_vc_profile(ctx, vc_id)

        try:
            verdict = await self.oracle.judge_pitch(content, vc.thesis)
        except RankingOracleError as e:
            logger.error("pitch_oracle_failed", founder_id=str(founder.id), vc_id=str(vc.id), error=str(e))
            raise UpstreamServiceError("Could not evaluate the pitch. Please try again later.") from e

        crm_requested = False
        if verdict.is_match:
            try:
                self.notifier.notify_match(vc, founder, deck_link or founder.deck_link)
                crm_requested = True
            except Exception as e:
                logger.error(
                    "crm_notify_failed",
                    founder_id=str(founder.id),
                    vc_id=str(vc.id),
                    error=str(e),
                    error_type=type(e).__name__,
                )

        logger.info(
            "pitch_judged",
            founder_id=str(founder.id),
            vc_id=str(vc.id),
            is_match=verdict.is_match,
            crm_requested=crm_requested,
        )
        return PitchDecision(
            vc_id=vc.id,
            is_match=verdict.is_match,
            memo=verdict.memo,
            analysis=verdict.analysis,
            crm_sync_requested=crm_requested,
        )
