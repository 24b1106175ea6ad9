"""Admin endpoints - review of membership applications"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from memberhub.core.dependencies import get_db
from memberhub.middleware.auth import get_current_admin
from memberhub.models.admin import Admin
from memberhub.models.member import MemberStatus
from memberhub.schemas.member_schemas import MemberResponse, MemberReviewResponse
from memberhub.services.member_service import list_members, review_member

router = APIRouter()


@router.get("/members", response_model=List[MemberResponse])
async def get_members(
    status: Optional[MemberStatus] = Query(None),
    organization_id: Optional[int] = Query(None, alias="organizationId"),
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    ## List members

    **Role:** ADMIN (own organization) or SUPER_ADMIN (all, or `?organizationId=`).
    """
    return list_members(db, current_admin, status, organization_id)


@router.post("/member-approve/{member_id}", response_model=MemberReviewResponse)
async def approve_member(
    member_id: int,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    ## Approve a pending member

    - HTTP 403 → member belongs to another organization.
    - HTTP 404 → no such member.
    - HTTP 409 → already reviewed.
    """
    member = review_member(db, member_id, current_admin, approve=True)
    return MemberReviewResponse(message="Member approved", member=MemberResponse.model_validate(member))


@router.post("/member-reject/{member_id}", response_model=MemberReviewResponse)
async def reject_member(
    member_id: int,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    member = review_member(db, member_id, current_admin, approve=False)
    return MemberReviewResponse(message="Member rejected", member=MemberResponse.model_validate(member))
