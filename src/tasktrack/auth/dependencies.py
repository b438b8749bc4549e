"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers (or at the
include_router level) to resolve the caller and gate by role.

Request flow for a protected route:
1. get_current_identity: parse "Authorization: Bearer <token>", verify
   the JWT, confirm the user still exists, attach RequestIdentity to
   request.state.identity.
2. require_roles(...): optional, per route; pure check of the identity's
   role against an allowed set.

Every failure in step 1 is the same 401 to the client. The reason
(missing header, expired, bad signature, vanished user) is only logged.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Iterable, Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.auth.jwt import TokenError, TokenService
from tasktrack.auth.password import PasswordHasher
from tasktrack.config import settings
from tasktrack.db.engine import get_db
from tasktrack.errors import Forbidden, Unauthenticated
from tasktrack.services.user_store import UserStore

logger = structlog.get_logger()

_BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class RequestIdentity:
    """The authenticated caller for the lifetime of one request."""

    id: str
    role: str


# ─── Component providers ─────────────────────────────────


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


# ─── Identity ────────────────────────────────────────────


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from a "Bearer <token>" header value, else None."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX):].strip()
    return token or None


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> RequestIdentity:
    """Resolve the caller or fail with 401."""
    token = extract_bearer_token(authorization)
    if token is None:
        logger.info("auth.token_rejected", reason="missing_or_malformed_header")
        raise Unauthenticated()

    try:
        claims = tokens.verify(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=e.reason)
        raise Unauthenticated("Invalid or expired token") from e

    # A valid signature isn't enough: the account must still exist.
    user = await UserStore(db).find_by_id(claims.subject)
    if user is None:
        logger.info("auth.token_rejected", reason="unknown_subject", user_id=claims.subject)
        raise Unauthenticated("Invalid or expired token")

    identity = RequestIdentity(id=str(user.id), role=user.role)
    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=identity.id)
    return identity


# ─── Roles ───────────────────────────────────────────────


def authorize(identity: Optional[RequestIdentity], allowed: Iterable[str]) -> RequestIdentity:
    """Check `identity` against the allowed roles.

    An empty `allowed` set admits any authenticated identity.
    """
    if identity is None:
        raise Unauthenticated()
    allowed = frozenset(allowed)
    if allowed and identity.role not in allowed:
        logger.info("auth.forbidden", user_id=identity.id, role=identity.role)
        raise Forbidden()
    return identity


def require_roles(*roles: str):
    """Dependency factory: Depends(require_roles("admin"))."""
    allowed = frozenset(roles)

    def _dep(
        request: Request,
        _identity: RequestIdentity = Depends(get_current_identity),
    ) -> RequestIdentity:
        return authorize(getattr(request.state, "identity", None), allowed)

    return _dep
