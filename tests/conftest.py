"""
Funnel.vc Test Configuration and Fixtures
Shared pytest fixtures for all test modules.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agents.matching.oracle import RankingOracle
from funnel.core.access import RequestContext
from funnel.core.config import settings
from funnel.models import Base
from tests.fixtures.factories import FounderProfileFactory, UserFactory, VCProfileFactory


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """Create an async SQLite engine for testing."""
    # Use a unique temp file for each test to ensure complete isolation
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest_asyncio.fixture(scope="function")
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create an async session for testing."""
    async_session_maker = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


# =============================================================================
# User and Profile Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_founder_user(async_session):
    """A founder account with no profile yet."""
    user = UserFactory.create(role="founder")
    async_session.add(user)
    await async_session.commit()
    return user


@pytest_asyncio.fixture
async def db_vc_user(async_session):
    """A VC account with no profile yet."""
    user = UserFactory.create(role="vc")
    async_session.add(user)
    await async_session.commit()
    return user


@pytest_asyncio.fixture
async def db_founder_profile(async_session, db_founder_user):
    """Fintech founder asking for 500k, with raw deck text and no analysis."""
    profile = FounderProfileFactory.create(user_id=db_founder_user.id)
    async_session.add(profile)
    await async_session.commit()
    return profile


@pytest_asyncio.fixture
async def db_vc_profile(async_session, db_vc_user):
    """Fintech VC writing 100k-1M checks."""
    profile = VCProfileFactory.create(user_id=db_vc_user.id, sectors=["Fintech", "SaaS"])
    async_session.add(profile)
    await async_session.commit()
    return profile


async def create_vc(session: AsyncSession, **kwargs):
    """Create a VC user and profile in one go."""
    user = UserFactory.create(role="vc")
    session.add(user)
    await session.flush()
    profile = VCProfileFactory.create(user_id=user.id, **kwargs)
    session.add(profile)
    await session.commit()
    return profile


@pytest.fixture
def founder_ctx(db_founder_user) -> RequestContext:
    return RequestContext(user_id=db_founder_user.id)


@pytest.fixture
def vc_ctx(db_vc_user) -> RequestContext:
    return RequestContext(user_id=db_vc_user.id)


# =============================================================================
# Collaborator Mocks
# =============================================================================


@pytest.fixture
def mock_oracle():
    """Ranking oracle with every call mocked."""
    oracle = MagicMock(spec=RankingOracle)
    oracle.rank = AsyncMock(return_value=[])
    oracle.judge_pitch = AsyncMock()
    oracle.analyze_deck = AsyncMock()
    return oracle


@pytest.fixture
def mock_notifier():
    """CRM notifier that records calls."""
    return MagicMock()


# =============================================================================
# API Fixtures
# =============================================================================


def make_token(user_id, expires_in: timedelta = timedelta(minutes=30)) -> str:
    """Issue a bearer token the way the identity service does."""
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest_asyncio.fixture
async def app_client(async_session, mock_oracle, mock_notifier) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test session and mocked collaborators."""
    from funnel.api.deps import get_notifier, get_oracle
    from funnel.database import get_db
    from funnel.main import app

    async def override_get_db():
        try:
            yield async_session
            await async_session.commit()
        except Exception:
            await async_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_oracle] = lambda: mock_oracle
    app.dependency_overrides[get_notifier] = lambda: mock_notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
