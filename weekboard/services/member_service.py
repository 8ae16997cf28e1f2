"""Member service for registration and profile management."""

import logging

from weekboard.core import record_store
from weekboard.core.errors import InputValidationError, StoreReadError, StoreWriteError
from weekboard.core.logging import log_with_context, span
from weekboard.domain.create_models import MemberCreate
from weekboard.domain.member import Member
from weekboard.domain.update_models import MemberUpdate


logger = logging.getLogger(__name__)


async def list_members() -> list[Member]:
    """All registered members; empty when the store cannot be read."""
    try:
        return await record_store.list_members()
    except StoreReadError as e:
        logger.warning("Member list unavailable, returning empty set: %s", e)
        return []


async def get_member(email: str) -> Member | None:
    """Member with this email, or None."""
    return next((member for member in await list_members() if member.email == email), None)


async def register_member(payload: MemberCreate) -> Member:
    """Register a member, or refresh the avatar of an existing one.

    Registration is an explicit action, never implied by signing in. The name
    of an already registered member is kept as is.

    Args:
        payload: Email, name and optional avatar/capacity

    Returns:
        The stored member

    Raises:
        InputValidationError: If email or name is missing
        StoreWriteError: If the store cannot be read or written
    """
    with span("member_service.register_member"):
        if not payload.email or not payload.name or not payload.name.strip():
            raise InputValidationError("Email and Name are required")

        try:
            members = await record_store.list_members()
        except StoreReadError as e:
            raise StoreWriteError(str(e)) from e

        existing = next((member for member in members if member.email == payload.email), None)
        if existing is not None:
            updated = await record_store.update_member_fields(payload.email, {"avatar_url": payload.avatar_url})
            log_with_context(logger, "info", "Refreshed avatar for existing member", member_id=payload.email)
            return updated or existing

        fields = {
            "email": payload.email,
            "name": payload.name.strip(),
            "avatar_url": payload.avatar_url,
            "created_at": record_store.now_millis(),
        }
        if payload.max_points:
            fields["max_points"] = payload.max_points

        member = Member(**fields)
        await record_store.append_member(member)
        log_with_context(logger, "info", "Registered member", member_id=member.email)
        return member


async def update_profile(payload: MemberUpdate) -> Member | None:
    """Update a member's name, avatar or capacity.

    Returns:
        The updated member, or None if no member has this email

    Raises:
        InputValidationError: If email is missing, no field is given, or maxPoints is not positive
        StoreWriteError: If the update fails
    """
    with span("member_service.update_profile"):
        if not payload.email:
            raise InputValidationError("Email is required")

        fields = payload.changed_fields()
        if not fields:
            raise InputValidationError("No profile fields supplied")
        if fields.get("max_points", 1) <= 0:
            raise InputValidationError("maxPoints must be a positive number")
        if "name" in fields:
            fields["name"] = fields["name"].strip()
            if not fields["name"]:
                raise InputValidationError("Name cannot be empty")

        return await record_store.update_member_fields(payload.email, fields)
