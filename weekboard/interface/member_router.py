"""HTTP surface for members and categories."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from weekboard.domain.category import Category
from weekboard.domain.create_models import MemberCreate
from weekboard.domain.member import Member
from weekboard.domain.update_models import MemberUpdate
from weekboard.interface.auth import Principal, require_principal
from weekboard.services import category_service, member_service


logger = logging.getLogger(__name__)

router = APIRouter(tags=["members"], dependencies=[Depends(require_principal)])


@router.get("/members", response_model=list[Member])
async def get_members() -> list[Member]:
    """List registered members."""
    return await member_service.list_members()


@router.get("/members/me", response_model=Member)
async def get_current_member(principal: Principal = Depends(require_principal)) -> Member:
    """The signed-in member's record; 404 until they register."""
    member = await member_service.get_member(principal.email)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not registered")
    return member


@router.post("/members")
async def post_member(payload: MemberCreate, principal: Principal = Depends(require_principal)) -> dict[str, Any]:
    """Register a member; defaults to the signed-in principal's identity."""
    if not payload.email and not payload.name:
        payload = payload.model_copy(
            update={
                "email": principal.email,
                "name": principal.name,
                "avatar_url": payload.avatar_url or principal.avatar_url,
            }
        )
    await member_service.register_member(payload)
    return {"success": True}


@router.put("/members")
async def put_member(payload: MemberUpdate) -> dict[str, Any]:
    """Update profile fields (name, avatarUrl, maxPoints). Unknown emails are a no-op."""
    await member_service.update_profile(payload)
    return {"success": True}


@router.get("/categories", response_model=list[Category])
async def get_categories() -> list[Category]:
    """List task categories."""
    return await category_service.list_categories()
