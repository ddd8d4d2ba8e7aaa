"""
Founder Profile Service
Turns a founder submission into a stored profile: deck text extraction,
one-shot deck analysis, then an upsert.
"""
import logging
from typing import Optional
from urllib.parse import quote

from agents.matching.oracle import RankingOracle, RankingOracleError
from funnel.core.access import RequestContext, require_identity
from funnel.core.config import settings
from funnel.core.exceptions import ValidationError
from funnel.models import FounderProfile
from funnel.schemas.profile import FounderProfileCreate
from funnel.services.deck_extractor import extract_deck_text, fetch_deck
from funnel.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


def upload_link(filename: str) -> str:
    """Public link recorded for an uploaded deck."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1] or "deck.pdf"
    return f"{settings.uploads_base_url}{quote(name)}"


class FounderProfileService:
    """Builds and stores founder profiles."""

    def __init__(self, store: ProfileStore, oracle: RankingOracle):
        self.store = store
        self.oracle = oracle

    async def submit(
        self,
        ctx: RequestContext,
        data: FounderProfileCreate,
        deck_content: Optional[bytes] = None,
    ) -> FounderProfile:
        """
        Create or replace the caller's founder profile.

        Args:
            ctx: Caller context.
            data: Validated submission.
            deck_content: Uploaded PDF bytes. When omitted the deck is
                downloaded from ``data.deck_link``.

        Returns:
            The stored profile.

        Raises:
            ValidationError: No deck link and no upload.
            ExtractionError: The deck could not be downloaded or read.
        """
        owner_id = require_identity(ctx)

        if deck_content is None:
            if data.deck_link is None:
                raise ValidationError([{"field": "deckLink", "message": "Field required"}])
            deck_content = await fetch_deck(str(data.deck_link))

        deck = extract_deck_text(deck_content)

        analysis = None
        try:
            result = await self.oracle.analyze_deck(
                deck.full_text[: settings.deck_analysis_chars],
                data.sector,
                data.ask_amount,
            )
            analysis = result.model_dump()
        except RankingOracleError as e:
            logger.warning(f"Deck analysis failed for user {owner_id}, storing profile without it: {e}")

        return await self.store.upsert_founder_profile(
            ctx,
            owner_id,
            {
                "startup_name": data.startup_name,
                "sector": data.sector,
                "ask_amount": data.ask_amount,
                "deck_link": str(data.deck_link),
                "deck_text": deck.full_text,
                "deck_pages": deck.pages,
                "general_analysis": analysis,
            },
        )
