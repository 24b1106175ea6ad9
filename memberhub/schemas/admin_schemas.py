"""Admin, admin-request and approval schemas"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from memberhub.models.admin import AdminRole, AdminStatus
from memberhub.models.admin_request import RequestStatus
from memberhub.schemas.base import CamelModel


class AdminResponse(CamelModel):
    """Live admin account"""
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: AdminRole
    level: Optional[str] = None
    experience: Optional[str] = None
    organization_id: Optional[int] = None
    organization_name: Optional[str] = None
    status: AdminStatus
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None


class AdminRequestResponse(CamelModel):
    """Admin application as seen by the superadmin; never exposes the hash"""
    id: int
    email: str
    first_name: str
    last_name: str
    phone: str
    username: str
    organization_id: int
    organization_name: Optional[str] = None
    experience: Optional[str] = None
    level: Optional[str] = None
    appointer: Optional[str] = None
    verification_type: str
    verified_contact: str
    status: RequestStatus
    requested_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    review_note: Optional[str] = None


class ApprovedAdminSummary(CamelModel):
    id: int
    username: str
    email: str
    organization_id: Optional[int] = None
    organization_name: Optional[str] = None
    role: AdminRole
    status: AdminStatus


class LoginCredentials(CamelModel):
    username: str
    credentials_source: str = "original"
    note: str = "Log in with the username and password chosen at registration"


class AdminApprovalResponse(CamelModel):
    success: bool = True
    message: str
    request_id: int
    admin: ApprovedAdminSummary
    login_credentials: LoginCredentials


class AdminRejectRequest(CamelModel):
    reason: Optional[str] = Field(None, max_length=1000)


class AdminRejectionResponse(CamelModel):
    success: bool = True
    message: str
    request: AdminRequestResponse


class AdminProfileUpdate(CamelModel):
    """Only the fields present in the body are changed; blank clears a field"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    experience: Optional[str] = None
