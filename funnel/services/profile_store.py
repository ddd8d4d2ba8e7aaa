"""
Profile Store
Persistence for founder and VC profiles with per-call access checks.

Every public method takes the caller's RequestContext and evaluates the
access policy before any statement is issued.
"""
import json
import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from funnel.core.access import Action, RequestContext, Resource, authorize
from funnel.core.exceptions import ConflictError, NotFoundError
from funnel.models import FounderProfile, VCProfile

logger = logging.getLogger(__name__)

# Columns replaced on every submission; anything omitted is cleared.
FOUNDER_FIELDS = (
    "startup_name",
    "sector",
    "ask_amount",
    "deck_link",
    "deck_text",
    "deck_pages",
    "general_analysis",
)

VC_FIELDS = (
    "firm_name",
    "slug",
    "thesis",
    "sectors",
    "min_check",
    "max_check",
    "monday_board_id",
)


class ProfileStore:
    """Service for reading and writing marketplace profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self, model: type):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite.insert(model)
        return postgresql.insert(model)

    async def _upsert(self, model: type, owner_id: UUID, values: dict[str, Any]):
        """
        Insert or fully replace the row owned by ``owner_id``.

        Runs as one INSERT ... ON CONFLICT (user_id) DO UPDATE statement so a
        concurrent reader sees either the old or the new record, never a mix.
        """
        now = datetime.utcnow()
        row = {"user_id": owner_id, **values, "updated_at": now}
        stmt = self._insert(model).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={**values, "updated_at": now},
        )
        await self.db.execute(stmt)

        result = await self.db.execute(
            select(model)
            .where(model.user_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    # =========================================================================
    # Founder profiles
    # =========================================================================

    async def upsert_founder_profile(
        self,
        ctx: RequestContext,
        owner_id: UUID,
        data: dict[str, Any],
    ) -> FounderProfile:
        """
        Create or replace the founder profile owned by ``owner_id``.

        Args:
            ctx: Caller context; must be the owner.
            owner_id: Owning user.
            data: Column values keyed by FOUNDER_FIELDS.

        Returns:
            The stored FounderProfile.
        """
        authorize(ctx, Resource.FOUNDER_PROFILE, Action.WRITE, owner_id)

        values = {field: data.get(field) for field in FOUNDER_FIELDS}
        profile = await self._upsert(FounderProfile, owner_id, values)

        logger.info(f"Upserted founder profile {profile.id} for user {owner_id}")
        return profile

    async def find_founder_profile(
        self,
        ctx: RequestContext,
        owner_id: UUID,
    ) -> Optional[FounderProfile]:
        """Return the owner's founder profile, or None if there is none."""
        authorize(ctx, Resource.FOUNDER_PROFILE, Action.READ, owner_id)

        result = await self.db.execute(
            select(FounderProfile).where(FounderProfile.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_founder_profile(self, ctx: RequestContext, owner_id: UUID) -> FounderProfile:
        """
        Return the owner's founder profile.

        Raises:
            NotFoundError: If the owner has no founder profile.
        """
        profile = await self.find_founder_profile(ctx, owner_id)
        if profile is None:
            raise NotFoundError("Founder profile")
        return profile

    # =========================================================================
    # VC profiles
    # =========================================================================

    async def upsert_vc_profile(
        self,
        ctx: RequestContext,
        owner_id: UUID,
        data: dict[str, Any],
    ) -> VCProfile:
        """
        Create or replace the VC profile owned by ``owner_id``.

        ``data["sectors"]`` may be a list; it is stored JSON-encoded.

        Raises:
            ConflictError: If the slug belongs to another VC.
        """
        authorize(ctx, Resource.VC_PROFILE, Action.WRITE, owner_id)

        values = {field: data.get(field) for field in VC_FIELDS}
        if not isinstance(values["sectors"], str):
            values["sectors"] = json.dumps(list(values["sectors"] or []))

        taken = await self.db.execute(
            select(VCProfile.id).where(
                VCProfile.slug == values["slug"],
                VCProfile.user_id != owner_id,
            )
        )
        if taken.first() is not None:
            raise ConflictError(f"Slug '{values['slug']}' is already taken")

        try:
            profile = await self._upsert(VCProfile, owner_id, values)
        except IntegrityError as e:
            if "slug" in str(e.orig).lower():
                raise ConflictError(f"Slug '{values['slug']}' is already taken") from e
            raise

        logger.info(f"Upserted VC profile {profile.id} ({profile.slug}) for user {owner_id}")
        return profile

    async def get_vc_profile_by_slug(self, ctx: RequestContext, slug: str) -> VCProfile:
        """
        Return a VC profile by its public slug.

        Raises:
            NotFoundError: If no VC uses the slug.
        """
        authorize(ctx, Resource.VC_PROFILE, Action.READ)

        result = await self.db.execute(select(VCProfile).where(VCProfile.slug == slug))
        profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError("VC profile")
        return profile

    async def get_vc_profile(self, ctx: RequestContext, vc_id: UUID) -> VCProfile:
        """
        Return a VC profile by id.

        Raises:
            NotFoundError: If the VC does not exist.
        """
        authorize(ctx, Resource.VC_PROFILE, Action.READ)

        profile = await self.db.get(VCProfile, vc_id)
        if profile is None:
            raise NotFoundError("VC profile")
        return profile

    async def list_vc_candidates(self, ctx: RequestContext, check_size: int) -> list[VCProfile]:
        """
        List VCs whose check range contains ``check_size``.

        Both bounds are inclusive. Results are in insertion order.
        """
        authorize(ctx, Resource.VC_PROFILE, Action.READ)

        result = await self.db.execute(
            select(VCProfile)
            .where(
                VCProfile.min_check <= check_size,
                VCProfile.max_check >= check_size,
            )
            .order_by(VCProfile.created_at, VCProfile.id)
        )
        return list(result.scalars().all())
