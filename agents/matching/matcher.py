"""
Candidate Matching Engine
Hard filter selecting the VCs a founder is eligible to pitch.

Two stages:
1. Check-size range, evaluated by the profile store (inclusive both bounds)
2. Sector containment, exact taxonomy string equality
"""

import json
from typing import TYPE_CHECKING, Any, Optional

import structlog

from funnel.core.access import RequestContext

from .models import VCCandidate

if TYPE_CHECKING:
    from funnel.services.profile_store import ProfileStore

logger = structlog.get_logger(agent="matcher")


class MalformedSectorsError(ValueError):
    """Stored VC sector data is not a JSON list of strings."""


def parse_sectors(raw: Any) -> list[str]:
    """
    Decode a VC's stored sector list.

    Args:
        raw: JSON text as stored, or an already decoded list.

    Returns:
        List of sector strings.

    Raises:
        MalformedSectorsError: If the value does not decode to a list of strings.
    """
    value = raw
    if isinstance(raw, (str, bytes)):
        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MalformedSectorsError(f"Sectors are not valid JSON: {e}") from e

    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedSectorsError(f"Sectors must be a list of strings, got {type(value).__name__}")

    return value


def filter_by_sector(sector: str, profiles: list[Any]) -> list[VCCandidate]:
    """
    Keep VCs whose sector list contains ``sector``.

    VCs with unparseable sector data are excluded and logged.
    Input order is preserved.
    """
    candidates: list[VCCandidate] = []
    for profile in profiles:
        try:
            sectors = parse_sectors(profile.sectors)
        except MalformedSectorsError as e:
            logger.warning(
                "malformed_vc_sectors",
                vc_id=str(profile.id),
                slug=profile.slug,
                error=str(e),
            )
            continue

        if sector in sectors:
            candidates.append(VCCandidate.from_profile(profile, sectors))

    return candidates


class CandidateMatcher:
    """
    Hard-filter matcher.

    Deterministic and local: no oracle is consulted here. The output is
    the full eligible set in store order; ranking happens downstream.
    """

    def __init__(self, store: "ProfileStore"):
        """
        Initialize matcher.

        Args:
            store: Profile store used to query VC candidates.
        """
        self.store = store

    async def find_candidates(
        self,
        ctx: RequestContext,
        founder: Optional[Any],
    ) -> list[VCCandidate]:
        """
        Find every VC compatible with the founder's ask and sector.

        Args:
            ctx: Caller context.
            founder: FounderProfile, or None if the caller has none.

        Returns:
            Eligible candidates, empty if there is no founder profile.
        """
        if founder is None:
            return []

        in_range = await self.store.list_vc_candidates(ctx, founder.ask_amount)
        candidates = filter_by_sector(founder.sector, in_range)

        logger.info(
            "hard_filter_complete",
            founder_id=str(founder.id),
            in_range=len(in_range),
            candidates=len(candidates),
        )
        return candidates
