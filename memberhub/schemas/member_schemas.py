"""Member Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from memberhub.models.member import MemberStatus
from memberhub.schemas.base import CamelModel


class MemberRegisterRequest(CamelModel):
    """
    Required fields are validated by the member service so a missing field
    yields a 400 that names it.
    """
    organization_id:    Optional[int] = None
    first_name:         Optional[str] = None
    last_name:          Optional[str] = None
    email:              Optional[str] = None
    phone:              Optional[str] = None
    address:            Optional[str] = None

    designation:        Optional[str] = None
    experience:         Optional[str] = None
    achievements:       Optional[str] = None
    payment_method:     Optional[str] = None
    password:           Optional[str] = None

    verification_token: Optional[str] = None


class MemberRegisterResponse(CamelModel):
    success:            bool = True
    message:            str
    application_id:     int
    membership_id:      str
    status:             MemberStatus
    temporary_password: Optional[str] = None
    organization_name:  str
    submitted_at:       Optional[datetime] = None


class MemberResponse(CamelModel):
    id:                int
    membership_id:     str
    first_name:        str
    last_name:         str
    email:             str
    phone:             str
    address:           str
    designation:       Optional[str] = None
    experience:        Optional[str] = None
    achievements:      Optional[str] = None
    payment_method:    Optional[str] = None
    organization_id:   int
    organization_name: Optional[str] = None
    status:            MemberStatus
    created_at:        datetime
    reviewed_at:       Optional[datetime] = None
    last_login:        Optional[datetime] = None


class MemberReviewResponse(CamelModel):
    success: bool = True
    message: str
    member:  MemberResponse


class MemberProfileUpdate(CamelModel):
    """Only the fields present in the body are changed; phone and address may not be cleared"""
    phone:        Optional[str] = None
    address:      Optional[str] = None
    designation:  Optional[str] = None
    experience:   Optional[str] = None
    achievements: Optional[str] = None


class MemberRosterEntry(CamelModel):
    """Directory entry visible to fellow members; no contact details"""
    id:            int
    membership_id: str
    first_name:    str
    last_name:     str
    designation:   Optional[str] = None
    status:        MemberStatus


class OrganizationRosterResponse(CamelModel):
    organization_id:   int
    organization_name: str
    members:           List[MemberRosterEntry]
