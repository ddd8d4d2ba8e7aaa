"""
VC API Endpoints
VC onboarding and public thesis pages.
"""

import logging

from fastapi import APIRouter, status

from agents.matching.matcher import MalformedSectorsError, parse_sectors
from funnel.api.deps import AnonymousContext, CurrentContext, ProfileStoreDep
from funnel.schemas.vc import VCProfileCreate, VCProfileCreated, VCPublicProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vc", tags=["VC"])


@router.post(
    "/profile",
    response_model=VCProfileCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create or update VC profile",
)
async def upsert_vc_profile(
    data: VCProfileCreate,
    ctx: CurrentContext,
    store: ProfileStoreDep,
) -> VCProfileCreated:
    """Create the caller's VC profile, or replace it if one exists."""
    profile = await store.upsert_vc_profile(ctx, ctx.user_id, data.model_dump())
    return VCProfileCreated(slug=profile.slug)


@router.get(
    "/{slug}",
    response_model=VCPublicProfile,
    summary="Public VC profile",
)
async def get_vc_profile(
    slug: str,
    ctx: AnonymousContext,
    store: ProfileStoreDep,
) -> VCPublicProfile:
    """Get a VC's public thesis page. No authentication required."""
    profile = await store.get_vc_profile_by_slug(ctx, slug)

    try:
        sectors = parse_sectors(profile.sectors)
    except MalformedSectorsError as e:
        logger.warning(f"VC profile {profile.id} has malformed sectors: {e}")
        sectors = []

    return VCPublicProfile(
        id=profile.id,
        firm_name=profile.firm_name,
        slug=profile.slug,
        thesis=profile.thesis,
        sectors=sectors,
        min_check=profile.min_check,
        max_check=profile.max_check,
    )
