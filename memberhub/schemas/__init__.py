"""Pydantic schemas"""
from memberhub.schemas.base import CamelModel
from memberhub.schemas.registration_schemas import (
    RegistrationStep,
    AdminRegistrationRequest,
    AdminRegistrationResponse,
    ContactOTPRequest,
    ContactOTPVerifyRequest,
    OTPSentResponse,
    OTPVerifiedResponse,
)
from memberhub.schemas.admin_schemas import (
    AdminResponse,
    AdminRequestResponse,
    AdminApprovalResponse,
    AdminRejectRequest,
    AdminRejectionResponse,
    AdminProfileUpdate,
)
from memberhub.schemas.member_schemas import (
    MemberRegisterRequest,
    MemberRegisterResponse,
    MemberResponse,
    MemberReviewResponse,
    MemberProfileUpdate,
    MemberRosterEntry,
    OrganizationRosterResponse,
)
from memberhub.schemas.organization_schemas import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
)

__all__ = [
    "CamelModel",
    "RegistrationStep", "AdminRegistrationRequest", "AdminRegistrationResponse",
    "ContactOTPRequest", "ContactOTPVerifyRequest", "OTPSentResponse", "OTPVerifiedResponse",
    "AdminResponse", "AdminRequestResponse", "AdminApprovalResponse",
    "AdminRejectRequest", "AdminRejectionResponse", "AdminProfileUpdate",
    "MemberRegisterRequest", "MemberRegisterResponse", "MemberResponse", "MemberReviewResponse",
    "MemberProfileUpdate", "MemberRosterEntry", "OrganizationRosterResponse",
    "OrganizationCreate", "OrganizationUpdate", "OrganizationResponse",
]
