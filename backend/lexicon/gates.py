"""
Lexicon Backend: Request Gates (Identity + Role)
================================================

What:  Pre-handler checks that may short-circuit a request.
How:   Each gate is a FastAPI dependency that either returns a value or raises
       a LexiconError; the global handlers turn the error into a response, so
       the route handler never runs.
Who:   Declared on routes (`dependencies=ADMIN_GATES`) or whole routers.

Gate Pipeline:
    verify_identity  →  require_role(...)  →  handler
         │ 401               │ 403

    FastAPI resolves a route's `dependencies` list in declaration order, and
    `require_role` itself depends on `verify_identity`, so the role check can
    never run before (or without) a verified identity. Within one request the
    identity is resolved once and cached.

Identity tokens:
    Authorization: Bearer <JWT>, HMAC-signed with settings.jwt_secret.
    Claims read: userId (or sub), role, email, status (optional, must be
    "active" when present). Token issuance lives in the auth service, not here.
"""

import logging
from typing import List, Optional

import jwt
from fastapi import Depends, Request
from fastapi.params import Depends as DependsParam
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from lexicon.config import settings
from lexicon.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by the auth service")


class Identity(BaseModel):
    """The verified caller, available to handlers as `request.state.identity`."""

    user_id: str
    role: str
    email: Optional[str] = None


def _translate(request: Request, key: str, default: str) -> str:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        return default
    text = catalog.translate(key)
    return default if text == key else text


def decode_token(token: str) -> Identity:
    """
    Verify a bearer token and map its claims to an Identity.

    Raises:
        AuthenticationError: bad signature, expired, malformed or inactive
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": "expired"},
        )
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": type(e).__name__},
        )

    user_id = claims.get("userId") or claims.get("sub")
    role = claims.get("role")
    if not user_id or not role or claims.get("status", "active") != "active":
        raise AuthenticationError(
            message="Invalid or inactive user",
            context={"user_id": user_id, "status": claims.get("status")},
        )

    return Identity(user_id=str(user_id), role=str(role), email=claims.get("email"))


async def verify_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """Gate 1: a valid bearer token must be presented (401 otherwise)."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(
            message=_translate(request, "auth.tokenRequired", "Access token required"),
        )

    identity = decode_token(credentials.credentials)
    request.state.identity = identity
    logger.debug("Verified identity %s (role=%s)", identity.user_id, identity.role)
    return identity


def require_role(*roles: str):
    """
    Gate 2 factory: the verified identity must hold one of `roles` (403 otherwise).

    Example:
        require_owner_or_admin = require_role("superadmin", "stadium_owner")
    """
    allowed = list(roles)

    async def role_gate(
        request: Request,
        identity: Identity = Depends(verify_identity),
    ) -> Identity:
        if identity.role not in allowed:
            logger.warning(
                "Role gate rejected %s: role=%s, required one of %s",
                identity.user_id,
                identity.role,
                allowed,
            )
            raise AuthorizationError(
                message=_translate(request, "auth.adminOnly", "Insufficient permissions"),
                required_roles=allowed,
            )
        return identity

    role_gate.__name__ = f"require_role_{'_'.join(allowed)}"
    return role_gate


require_admin = require_role(settings.admin_role)

# Declared order is execution order: identity first, then role.
ADMIN_GATES: List[DependsParam] = [Depends(verify_identity), Depends(require_admin)]
