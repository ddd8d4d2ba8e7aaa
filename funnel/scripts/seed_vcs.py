"""
Seed Demo VC Profiles
Populates users and vc_profiles with randomly generated investors.

Each VC is written through ProfileStore under its own user's context, the
same path the onboarding endpoint takes. Re-running replaces the demo
profiles in place.

Usage:
    python -m funnel.scripts.seed_vcs
    python -m funnel.scripts.seed_vcs --count 50 --seed 42
"""

import argparse
import asyncio
import logging
import random
import sys
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from funnel.constants import SECTORS
from funnel.core.access import RequestContext
from funnel.models import User
from funnel.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

ADJECTIVES = [
    "Blue", "Red", "Green", "Golden", "Iron", "Velocity", "First", "Next", "Future", "Global", "Local",
    "Alpha", "Omega", "Prime", "Apex", "Summit", "Horizon", "North", "South", "East", "West",
]
NOUNS = [
    "Rock", "River", "Mountain", "Star", "Gate", "Bridge", "Oak", "Pine", "Wave", "Peak", "Valley",
    "Harbor", "Bay", "Point", "Capital", "Ventures", "Partners", "Fund", "Group", "Associates",
]


def build_seed_vc(index: int, rng: random.Random) -> dict[str, Any]:
    """
    Generate one demo VC.

    Check sizes: min in 50k-200k, max = min + 100k-1M, in thousands.
    """
    adjective = rng.choice(ADJECTIVES)
    noun = rng.choice(NOUNS)
    firm_name = f"{adjective} {noun} {index}"
    sectors = rng.sample(SECTORS, rng.randint(1, 5))
    min_check = rng.randint(50, 200) * 1000
    max_check = min_check + rng.randint(100, 1000) * 1000

    return {
        "email": f"vc{index}@demo.com",
        "name": f"Partner at {firm_name}",
        "profile": {
            "firm_name": firm_name,
            "slug": f"{adjective.lower()}-{noun.lower()}-{index}",
            "thesis": f"We invest in ambitious founders building in {', '.join(sectors)}. Looking for 10x returns.",
            "sectors": sectors,
            "min_check": min_check,
            "max_check": max_check,
            "monday_board_id": None,
        },
    }


async def seed_vcs(session: AsyncSession, count: int = 100, rng: Optional[random.Random] = None) -> int:
    """
    Create or refresh ``count`` demo VCs.

    Args:
        session: Database session. The caller commits.
        count: Number of VCs.
        rng: Random source, for reproducible runs.

    Returns:
        Number of VC profiles written.
    """
    rng = rng or random.Random()
    store = ProfileStore(session)
    written = 0

    for index in range(count):
        seed = build_seed_vc(index, rng)

        result = await session.execute(select(User).where(User.email == seed["email"]))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(email=seed["email"], name=seed["name"], role="vc")
            session.add(user)
            await session.flush()

        ctx = RequestContext(user_id=user.id)
        await store.upsert_vc_profile(ctx, user.id, seed["profile"])
        written += 1

    logger.info(f"Seeded {written} VC profiles")
    return written


async def run(count: int, seed: Optional[int]) -> int:
    from funnel.database import get_async_session

    async with get_async_session() as session:
        return await seed_vcs(session, count=count, rng=random.Random(seed))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the Funnel.vc database with demo VC profiles")
    parser.add_argument("--count", type=int, default=100, help="Number of VCs to create (default: 100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        written = asyncio.run(run(args.count, args.seed))
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)

    print(f"Seeded {written} VCs.")


if __name__ == "__main__":
    main()
