"""Schemas for the OTP-gated registration pipelines (admin and member)."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from memberhub.schemas.base import CamelModel


class RegistrationStep(str, Enum):
    SEND_OTP              = "send-otp"
    VERIFY_OTP            = "verify-otp"
    COMPLETE_REGISTRATION = "complete-registration"


class AdminRegistrationRequest(CamelModel):
    """
    Body of ``POST /admin-registration``. Every field except ``step`` is
    optional here; which ones are required depends on the step and is
    enforced by the registration service so that missing fields produce a
    400 naming each one.
    """
    step:              str

    verification_type: Optional[str] = None
    email:             Optional[str] = None
    phone:             Optional[str] = None
    otp:               Optional[str] = None

    organization:      Optional[int] = Field(None, description="Organization id")
    first_name:        Optional[str] = None
    last_name:         Optional[str] = None
    username:          Optional[str] = None
    password:          Optional[str] = None
    experience:        Optional[str] = None
    level:             Optional[str] = None
    appointer:         Optional[str] = None

    verified_contact:   Optional[str] = None
    verification_token: Optional[str] = None


class ContactOTPRequest(CamelModel):
    """Send-OTP body for the member registration pipeline."""
    verification_type: Optional[str] = None
    email:             Optional[str] = None
    phone:             Optional[str] = None


class ContactOTPVerifyRequest(ContactOTPRequest):
    otp: Optional[str] = None


class OTPSentResponse(CamelModel):
    success:            bool = True
    message:            str
    verification_type:  str
    contact:            str
    expires_in_minutes: int
    delivered:          bool = True


class OTPVerifiedResponse(CamelModel):
    success:            bool = True
    message:            str = "OTP verified successfully"
    verification_token: str
    verified_contact:   str
    verification_type:  str


class AdminRegistrationResponse(CamelModel):
    success:           bool = True
    message:           str
    request_id:        int
    email:             str
    username:          str
    status:            str
    verification_type: str
    verified_contact:  str
    submitted_at:      Optional[datetime] = None
    note:              str = "Your chosen username and password will be transferred when approved"
