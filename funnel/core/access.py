"""
Access Policy
Per-record authorization rules for profile reads and writes.

Every store operation receives the caller's RequestContext explicitly and
evaluates the policy before issuing any statement. The caller identity is
never written to the database connection, so pooled connections cannot carry
one request's identity into another.
"""
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from uuid import UUID

from funnel.core.exceptions import AuthorizationError, UnauthorizedError

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Operations guarded by the policy."""

    READ = "read"
    WRITE = "write"


class Audience(str, Enum):
    """Who an action is open to."""

    OWNER = "owner"
    PUBLIC = "public"


class Resource(str, Enum):
    """Resources under access control."""

    FOUNDER_PROFILE = "founder_profile"
    VC_PROFILE = "vc_profile"


@dataclass(frozen=True)
class ResourcePolicy:
    """Audience for each action on a resource."""

    read: Audience
    write: Audience = Audience.OWNER

    def audience_for(self, action: Action) -> Audience:
        return self.read if action is Action.READ else self.write


# Founders see only their own profile; VC profiles are public so founders can
# browse and pitch them, but only the owning VC may change one.
POLICIES: dict[Resource, ResourcePolicy] = {
    Resource.FOUNDER_PROFILE: ResourcePolicy(read=Audience.OWNER),
    Resource.VC_PROFILE: ResourcePolicy(read=Audience.PUBLIC),
}


@dataclass(frozen=True)
class RequestContext:
    """
    Caller identity for exactly one request.

    Built by the API layer from the verified identity and threaded through
    every store call. ``user_id`` is None for anonymous callers.
    """

    user_id: Optional[UUID] = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls(user_id=None)


def require_identity(ctx: RequestContext) -> UUID:
    """Return the caller's user id or raise UnauthorizedError."""
    if ctx is None or ctx.user_id is None:
        raise UnauthorizedError()
    return ctx.user_id


def authorize(
    ctx: RequestContext,
    resource: Resource,
    action: Action,
    owner_id: Optional[UUID] = None,
) -> None:
    """
    Check that the caller may perform ``action`` on ``resource``.

    Args:
        ctx: Caller context for the current request.
        resource: Resource being accessed.
        action: Read or write.
        owner_id: Owner of the record (required for owner-only rules).

    Raises:
        UnauthorizedError: Owner-only rule and no caller identity.
        AuthorizationError: Caller is not the record owner.
    """
    audience = POLICIES[resource].audience_for(action)
    if audience is Audience.PUBLIC:
        return

    caller_id = require_identity(ctx)
    if owner_id is None or caller_id != owner_id:
        logger.warning(
            f"Access denied: resource={resource.value} action={action.value} "
            f"caller={caller_id} owner={owner_id} request={ctx.request_id}"
        )
        raise AuthorizationError(f"Not authorized to {action.value} this {resource.value.replace('_', ' ')}")
