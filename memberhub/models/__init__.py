"""Database models"""
from memberhub.models.organization import Organization
from memberhub.models.otp import OTPEntry, OTPChannel, OTPPurpose
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.models.admin_request import AdminRequest, RequestStatus
from memberhub.models.member import Member, MemberStatus

__all__ = [
    "Organization", "OTPEntry", "OTPChannel", "OTPPurpose",
    "Admin", "AdminRole", "AdminStatus", "AdminRequest", "RequestStatus",
    "Member", "MemberStatus",
]
