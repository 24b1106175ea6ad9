"""Authentication and session schemas"""
from typing import List, Optional

from pydantic import Field, field_validator

from memberhub.schemas.admin_schemas import AdminResponse
from memberhub.schemas.base import CamelModel
from memberhub.schemas.member_schemas import MemberResponse


class TokenData(CamelModel):
    """Token data schema for JWT payload"""
    subject_id: Optional[int] = None
    role: Optional[str] = None
    username: Optional[str] = None
    membership_id: Optional[str] = None
    access: Optional[str] = None


class AdminLoginRequest(CamelModel):
    """``username`` may hold either the username or the email address"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminToken(CamelModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminResponse
    redirect_url: str


class MemberLoginRequest(CamelModel):
    membership_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MemberOTPVerifyRequest(CamelModel):
    membership_id: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1)


class MemberLoginResponse(CamelModel):
    """
    Either a session (``access_token`` set) or an OTP challenge
    (``otp_required`` with the channel and masked contact the code went to).
    """
    success: bool = True
    message: str
    otp_required: bool = False
    otp_channel: Optional[str] = None
    masked_phone: Optional[str] = None
    masked_email: Optional[str] = None
    expires_in_minutes: Optional[int] = None
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    access_level: Optional[str] = None
    redirect_url: Optional[str] = None
    restrictions: List[str] = []
    member: Optional[MemberResponse] = None


class PasswordChange(CamelModel):
    """Schema for changing password"""
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=100)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        """Validate new password strength"""
        if not any(char.isdigit() for char in v):
            raise ValueError('Password must contain at least one digit')
        if not any(char.isupper() for char in v):
            raise ValueError('Password must contain at least one uppercase letter')
        if not any(char.islower() for char in v):
            raise ValueError('Password must contain at least one lowercase letter')
        return v
