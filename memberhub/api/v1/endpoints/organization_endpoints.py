"""Organization endpoints - public listing and member roster"""
from typing import List, Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from memberhub.core.dependencies import get_db
from memberhub.middleware.auth import get_current_account
from memberhub.models.admin import Admin
from memberhub.models.member import Member
from memberhub.schemas.member_schemas import MemberRosterEntry, OrganizationRosterResponse
from memberhub.schemas.organization_schemas import OrganizationResponse
from memberhub.services.member_service import list_organization_members
from memberhub.services.organization_service import get_organization, list_active_organizations

router = APIRouter()


@router.get("", response_model=List[OrganizationResponse])
async def list_organizations(db: Session = Depends(get_db)):
    """
    ## List active organizations

    **Role:** Public. Feeds the organization picker on both registration forms.
    """
    return list_active_organizations(db)


@router.get("/{organization_id}/members", response_model=OrganizationRosterResponse)
async def organization_roster(
    organization_id: int,
    account: Union[Admin, Member] = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    """
    ## Approved members of an organization

    **Auth:** admin of the organization, the superadmin, or an approved member of it.

    - HTTP 403 → another organization, or a member whose application is still pending.
    - HTTP 404 → unknown organization.
    """
    org = get_organization(db, organization_id)
    members = list_organization_members(db, org.id, account)
    return OrganizationRosterResponse(
        organization_id=org.id,
        organization_name=org.name,
        members=[MemberRosterEntry.model_validate(member) for member in members],
    )
