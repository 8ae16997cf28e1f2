"""Authenticated principal supplied by the upstream identity provider.

The identity provider terminates the session and forwards the member's email
(and optionally display name and avatar) in request headers. Any
authenticated member may read and mutate any record.
"""

import logging

from fastapi import HTTPException, Request, status
from pydantic import BaseModel

from weekboard.core.config import settings


logger = logging.getLogger(__name__)

EMAIL_HEADER = "X-Auth-Email"
NAME_HEADER = "X-Auth-Name"
AVATAR_HEADER = "X-Auth-Avatar"

ANONYMOUS_EMAIL = "anonymous@localhost"


class Principal(BaseModel):
    """The signed-in member as reported by the identity provider."""

    email: str
    name: str = ""
    avatar_url: str = ""


def principal_from_request(request: Request) -> Principal | None:
    """Read the principal headers, or None when the request is unauthenticated."""
    email = request.headers.get(EMAIL_HEADER, "").strip()
    if not email:
        return None
    return Principal(
        email=email,
        name=request.headers.get(NAME_HEADER, "").strip(),
        avatar_url=request.headers.get(AVATAR_HEADER, "").strip(),
    )


async def require_principal(request: Request) -> Principal:
    """FastAPI dependency rejecting unauthenticated requests with 401."""
    principal = principal_from_request(request)
    if principal is not None:
        return principal

    if not settings.require_auth:
        return Principal(email=ANONYMOUS_EMAIL, name="Anonymous")

    logger.warning("auth_missing_principal", extra={"path": request.url.path})
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
