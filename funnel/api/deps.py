"""
FastAPI Dependencies
Shared dependencies for authentication, request context and collaborators.

Tokens are issued by the external identity service; this module only
verifies them.
"""
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agents.matching.oracle import AnthropicRankingOracle, RankingOracle
from funnel.core.access import RequestContext
from funnel.core.config import settings
from funnel.core.exceptions import UnauthorizedError
from funnel.database import get_db
from funnel.models import User
from funnel.services.crm import CeleryCRMNotifier, CRMNotifier
from funnel.services.profile_store import ProfileStore

security = HTTPBearer(auto_error=False)


# =============================================================================
# JWT Verification
# =============================================================================


def decode_token(token: str) -> UUID:
    """
    Decode a JWT access token and return its subject.

    Raises:
        JWTError: If the token is invalid, expired, or has no usable subject.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token missing subject")

    exp = payload.get("exp")
    if exp is not None and datetime.fromtimestamp(exp, tz=timezone.utc) < datetime.now(timezone.utc):
        raise JWTError("Token has expired")

    try:
        return UUID(str(subject))
    except ValueError as e:
        raise JWTError("Token subject is not a user id") from e


# =============================================================================
# Database Dependency
# =============================================================================

AsyncSessionDep = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# Authentication Dependencies
# =============================================================================


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSessionDep,
) -> User:
    """
    Get the current authenticated user from the bearer token.

    Raises UnauthorizedError (401) if not authenticated.
    """
    if credentials is None:
        raise UnauthorizedError()

    try:
        user_id = decode_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedError()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise UnauthorizedError()

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_request_context(user: CurrentUser) -> RequestContext:
    """Request-scoped caller context for the authenticated user."""
    return RequestContext(user_id=user.id)


def get_anonymous_context() -> RequestContext:
    """Request-scoped context for public endpoints."""
    return RequestContext.anonymous()


CurrentContext = Annotated[RequestContext, Depends(get_request_context)]
AnonymousContext = Annotated[RequestContext, Depends(get_anonymous_context)]


# =============================================================================
# Service Dependencies
# =============================================================================


def get_profile_store(db: AsyncSessionDep) -> ProfileStore:
    return ProfileStore(db)


@lru_cache
def get_oracle() -> RankingOracle:
    """Process-wide ranking oracle."""
    return AnthropicRankingOracle()


def get_notifier() -> CRMNotifier:
    return CeleryCRMNotifier()


ProfileStoreDep = Annotated[ProfileStore, Depends(get_profile_store)]
OracleDep = Annotated[RankingOracle, Depends(get_oracle)]
NotifierDep = Annotated[CRMNotifier, Depends(get_notifier)]
