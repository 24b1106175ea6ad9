"""Three-step OTP-gated registration: send-otp → verify-otp → complete-registration."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from memberhub.errors.exceptions import (
    ConflictException,
    DatabaseException,
    InvalidInputException,
    InvalidOrExpiredOTPException,
    MissingFieldException,
    VerificationRequiredException,
)
from memberhub.models.admin import Admin
from memberhub.models.admin_request import AdminRequest, RequestStatus
from memberhub.models.organization import Organization
from memberhub.models.otp import OTPChannel, OTPPurpose
from memberhub.schemas.registration_schemas import AdminRegistrationRequest
from memberhub.services.auth_service import (
    create_verification_token,
    decode_verification_token,
    get_password_hash,
)
from memberhub.services.otp_service import OTPIssue, issue_otp, normalize_contact, verify_otp
from memberhub.utils.logger import log_workflow_event
from memberhub.utils.validators import is_blank, is_valid_email, password_problem, username_problem

logger = logging.getLogger(__name__)

ADMIN_REQUIRED_FIELDS = (
    "organization", "first_name", "last_name", "email", "phone", "username", "password",
)

_FIELD_LABELS = {
    "organization": "organization",
    "organization_id": "organizationId",
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "username": "username",
    "password": "password",
    "verification_token": "verificationToken",
}


# ─────────────────────────────────────────────────────────────────────────────
# Shared steps
# ─────────────────────────────────────────────────────────────────────────────

def parse_verification_type(value: Optional[str]) -> OTPChannel:
    try:
        return OTPChannel((value or "").strip().lower())
    except ValueError:
        raise InvalidInputException(detail='Invalid verification type. Must be "email" or "phone"')


def contact_for(channel: OTPChannel, email: Optional[str], phone: Optional[str]) -> str:
    contact = email if channel == OTPChannel.EMAIL else phone
    if is_blank(contact):
        label = "Email" if channel == OTPChannel.EMAIL else "Phone"
        raise InvalidInputException(detail=f"{label} is required for {channel.value} verification")
    if channel == OTPChannel.EMAIL and not is_valid_email(contact.strip()):
        raise InvalidInputException(detail="Invalid email format")
    return normalize_contact(contact, channel)


def require_fields(values: dict, required) -> None:
    """Raise ``MissingFieldException`` naming every absent or blank field"""
    missing = [_FIELD_LABELS.get(name, name) for name in required if is_blank(values.get(name))]
    if missing:
        raise MissingFieldException(missing)


def send_contact_otp(
    db: Session,
    verification_type: Optional[str],
    email: Optional[str],
    phone: Optional[str],
    purpose: OTPPurpose,
) -> OTPIssue:
    """Step 1: validate the channel and contact, then issue a code."""
    channel = parse_verification_type(verification_type)
    contact = contact_for(channel, email, phone)
    return issue_otp(db, contact, channel, purpose)


def verify_contact_otp(
    db: Session,
    verification_type: Optional[str],
    email: Optional[str],
    phone: Optional[str],
    otp: Optional[str],
    purpose: OTPPurpose,
) -> Tuple[str, str, OTPChannel]:
    """
    Step 2: check the code and mint a verification token.

    Returns ``(verification_token, verified_contact, channel)``.
    """
    channel = parse_verification_type(verification_type)
    raw_contact = email if channel == OTPChannel.EMAIL else phone
    if is_blank(otp) or is_blank(raw_contact):
        raise InvalidInputException(detail="Missing required fields for OTP verification: otp and contact are required")

    contact = normalize_contact(raw_contact, channel)
    if not verify_otp(db, contact, otp, channel, purpose):
        raise InvalidOrExpiredOTPException()

    token = create_verification_token(contact, channel, purpose)
    return token, contact, channel


def require_verified_contact(
    token: Optional[str],
    purpose: OTPPurpose,
    email: Optional[str],
    phone: Optional[str],
    verified_contact: Optional[str] = None,
) -> Tuple[OTPChannel, str]:
    """
    Step 3 precondition: the server-minted token must prove that the
    submitted email (or phone) was verified for *purpose*.
    """
    claims = decode_verification_token(token, purpose)
    if claims is None:
        raise VerificationRequiredException()

    channel = OTPChannel(claims["channel"])
    submitted = email if channel == OTPChannel.EMAIL else phone
    if is_blank(submitted) or normalize_contact(submitted, channel) != claims["contact"]:
        raise VerificationRequiredException(
            detail=f"The verified {channel.value} does not match the one submitted. Please verify it again."
        )
    if verified_contact and normalize_contact(verified_contact, channel) != claims["contact"]:
        raise VerificationRequiredException(
            detail="The verified contact does not match the verification token. Please verify it again."
        )
    return channel, claims["contact"]


def get_active_organization(db: Session, organization_id) -> Organization:
    org = (
        db.query(Organization)
        .filter(Organization.id == organization_id, Organization.is_active == True)  # noqa: E712
        .first()
    )
    if org is None:
        raise InvalidInputException(detail="Invalid organization selected")
    return org


# ─────────────────────────────────────────────────────────────────────────────
# Admin pipeline
# ─────────────────────────────────────────────────────────────────────────────

def _email_taken_by_admin(db: Session, email: str) -> bool:
    return db.query(Admin).filter(func.lower(Admin.email) == email.lower()).first() is not None


def send_admin_registration_otp(db: Session, body: AdminRegistrationRequest) -> OTPIssue:
    channel = parse_verification_type(body.verification_type)
    contact = contact_for(channel, body.email, body.phone)
    if channel == OTPChannel.EMAIL and _email_taken_by_admin(db, contact):
        raise ConflictException(detail="An admin account with this email already exists")
    return issue_otp(db, contact, channel, OTPPurpose.ADMIN_REGISTRATION)


def verify_admin_registration_otp(db: Session, body: AdminRegistrationRequest) -> Tuple[str, str, OTPChannel]:
    return verify_contact_otp(
        db, body.verification_type, body.email, body.phone, body.otp,
        OTPPurpose.ADMIN_REGISTRATION,
    )


def complete_admin_registration(db: Session, body: AdminRegistrationRequest) -> AdminRequest:
    """
    Persist a pending ``AdminRequest`` carrying the applicant's own
    username and bcrypt password hash.
    """
    parse_verification_type(body.verification_type)
    require_fields(body.model_dump(), ADMIN_REQUIRED_FIELDS)

    email = body.email.strip().lower()
    username = body.username.strip()
    phone = normalize_contact(body.phone, OTPChannel.PHONE)

    if not is_valid_email(email):
        raise InvalidInputException(detail="Invalid email format")
    problem = username_problem(username) or password_problem(body.password)
    if problem:
        raise InvalidInputException(detail=problem)

    channel, verified = require_verified_contact(
        body.verification_token, OTPPurpose.ADMIN_REGISTRATION,
        email, phone, body.verified_contact,
    )
    org = get_active_organization(db, body.organization)

    duplicate_request = (
        db.query(AdminRequest)
        .filter(or_(func.lower(AdminRequest.email) == email, AdminRequest.username == username))
        .first()
    )
    duplicate_admin = (
        db.query(Admin)
        .filter(or_(func.lower(Admin.email) == email, Admin.username == username))
        .first()
    )
    if duplicate_request or duplicate_admin:
        raise ConflictException(detail="An account with this email or username already exists")

    request = AdminRequest(
        email=email,
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        phone=phone,
        organization_id=org.id,
        username=username,
        password_hash=get_password_hash(body.password),
        experience=body.experience,
        level=body.level,
        appointer=body.appointer,
        verification_type=channel.value,
        verified_contact=verified,
        status=RequestStatus.PENDING,
    )

    try:
        db.add(request)
        db.commit()
    except IntegrityError:
        db.rollback()
        log_workflow_event(
            "complete-registration", "CONFLICT", username,
            actor_contact=email, level=logging.WARNING,
        )
        raise ConflictException(detail="An account with this email or username already exists")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[Registration] Could not store admin request for {email}: {exc}")
        raise DatabaseException(detail="Registration failed. Please try again later.")

    db.refresh(request)
    if request.username != username:
        logger.error(f"[Registration] Stored username for request {request.id} does not match submission")
        raise DatabaseException(detail="Registration could not be stored correctly. Please contact support.")

    log_workflow_event(
        "complete-registration", "OK", f"request {request.id} for {username} ({org.name})",
        actor_id=request.id, actor_contact=email,
    )
    return request
