"""Superadmin endpoints - admin applications and organizations"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from memberhub.core.dependencies import get_db
from memberhub.middleware.auth import require_super_admin
from memberhub.models.admin import Admin
from memberhub.models.admin_request import RequestStatus
from memberhub.schemas.admin_schemas import (
    AdminApprovalResponse,
    AdminRejectionResponse,
    AdminRejectRequest,
    AdminRequestResponse,
    AdminResponse,
    ApprovedAdminSummary,
    LoginCredentials,
)
from memberhub.schemas.organization_schemas import (
    OrganizationCreate,
    OrganizationResponse,
    OrganizationUpdate,
)
from memberhub.services import approval_service, organization_service

router = APIRouter()


# ── Admin applications ────────────────────────────────────────────────────────

@router.get("/admin-requests", response_model=List[AdminRequestResponse])
async def list_admin_requests(
    status: Optional[RequestStatus] = Query(None, description="pending | approved | rejected"),
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """
    ## List admin applications, newest first

    **Role:** SUPER_ADMIN only.

    Optional `?status=pending|approved|rejected`. Password hashes are never returned.
    """
    return approval_service.list_admin_requests(db, status)


@router.post("/admin-approve/{request_id}", response_model=AdminApprovalResponse)
async def approve_admin_request(
    request_id: int,
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """
    ## Approve an admin application

    **Role:** SUPER_ADMIN only.

    Creates the admin account with the **username and password the applicant
    chose at registration**. The status change and the account are committed
    together; on any failure the request stays `pending`.

    ### Errors
    - HTTP 404 → no such request.
    - HTTP 409 → request already approved/rejected, or the username/email
      already belongs to a live admin.
    """
    admin, request = approval_service.approve_admin_request(db, request_id, current_admin)
    return AdminApprovalResponse(
        message=f"Admin request approved. {admin.username} can now log in with their original credentials.",
        request_id=request.id,
        admin=ApprovedAdminSummary.model_validate(admin),
        login_credentials=LoginCredentials(username=admin.username),
    )


@router.post("/admin-reject/{request_id}", response_model=AdminRejectionResponse)
async def reject_admin_request(
    request_id: int,
    body: Optional[AdminRejectRequest] = Body(None),
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """
    ## Reject an admin application

    **Role:** SUPER_ADMIN only. Optional JSON body `{ "reason": "..." }`.
    """
    reason = body.reason if body else None
    request = approval_service.reject_admin_request(db, request_id, current_admin, reason)
    return AdminRejectionResponse(
        message="Admin request rejected",
        request=AdminRequestResponse.model_validate(request),
    )


@router.get("/admins", response_model=List[AdminResponse])
async def list_admins(
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """List live admin accounts"""
    return approval_service.list_admins(db)


# ── Organizations ─────────────────────────────────────────────────────────────

@router.post("/organizations", response_model=OrganizationResponse, status_code=201)
async def create_organization(
    data: OrganizationCreate,
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """
    ## Create an organization

    **Role:** SUPER_ADMIN only. HTTP 409 → the name is taken.
    """
    return organization_service.create_organization(db, data)


@router.put("/organizations/{organization_id}", response_model=OrganizationResponse)
async def update_organization(
    organization_id: int,
    data: OrganizationUpdate,
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    return organization_service.update_organization(db, organization_id, data)


@router.delete("/organizations/{organization_id}", response_model=OrganizationResponse)
async def deactivate_organization(
    organization_id: int,
    current_admin: Admin = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """Soft delete: the organization is hidden from registration but its rows remain"""
    return organization_service.deactivate_organization(db, organization_id)
