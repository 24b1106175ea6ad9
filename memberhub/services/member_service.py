"""Membership applications, member login and admin review of members."""
from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple, Union

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from memberhub.core.config import settings
from memberhub.errors.exceptions import (
    AlreadyProcessedException,
    BadRequestException,
    ConflictException,
    DatabaseException,
    EmailConfigurationError,
    ForbiddenException,
    InternalServerException,
    InvalidInputException,
    InvalidOrExpiredOTPException,
    NotFoundException,
    UnauthorizedException,
)
from memberhub.models.admin import Admin
from memberhub.models.member import Member, MemberStatus
from memberhub.models.otp import OTPChannel, OTPPurpose
from memberhub.schemas.member_schemas import MemberRegisterRequest
from memberhub.services.auth_service import (
    ACCESS_FULL,
    ACCESS_LIMITED,
    authenticate_member,
    create_member_token,
    generate_temporary_password,
    get_member_by_membership_id,
    get_password_hash,
    touch_last_login,
    verify_password,
)
from memberhub.services.otp_service import issue_otp, mask_email, mask_phone, normalize_contact, verify_otp
from memberhub.services.registration_service import (
    get_active_organization,
    require_fields,
    require_verified_contact,
)
from memberhub.utils.email import send_member_registration_email, send_member_status_email
from memberhub.utils.logger import log_workflow_event
from memberhub.utils.sms import sms_available
from memberhub.utils.validators import is_valid_email, password_problem

logger = logging.getLogger(__name__)

MEMBER_REQUIRED_FIELDS = (
    "organization_id", "first_name", "last_name", "email", "phone", "address", "verification_token",
)
MEMBERSHIP_ID_ATTEMPTS = 5

FULL_DASHBOARD = "/member/dashboard"
PENDING_DASHBOARD = "/member/pending-dashboard"
PENDING_RESTRICTIONS = [
    "Member directory is unavailable until your application is approved",
    "Events and payments are unavailable until your application is approved",
]


@dataclass
class MemberLoginOutcome:
    """Either a session (``token`` set) or an OTP challenge"""
    member: Member
    message: str
    token: Optional[str] = None
    access: Optional[str] = None
    redirect_url: Optional[str] = None
    otp_required: bool = False
    otp_channel: Optional[str] = None
    masked_phone: Optional[str] = None
    masked_email: Optional[str] = None
    expires_in_minutes: Optional[int] = None
    restrictions: List[str] = field(default_factory=list)


# ── Membership ids ────────────────────────────────────────────────────────────

def _letters(value: str, length: int) -> str:
    cleaned = re.sub(r"[^A-Z]", "X", (value or "").strip().upper())
    return (cleaned + "X" * length)[:length]


def build_membership_id(organization_name: str, first_name: str, last_name: str,
                        suffix: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """
    ``<ORG3><YY><FN2><LN2><6 digits>``, e.g. ``DHA26JODO482913``.
    The digits default to the tail of the millisecond clock.
    """
    now = now or datetime.now(timezone.utc)
    if suffix is None:
        suffix = str(int(time.time() * 1000))[-6:]
    return (
        f"{_letters(organization_name, 3)}{now.strftime('%y')}"
        f"{_letters(first_name, 2)}{_letters(last_name, 2)}{suffix}"
    )


def generate_membership_id(db: Session, organization_name: str, first_name: str, last_name: str) -> str:
    candidate = build_membership_id(organization_name, first_name, last_name)
    for _ in range(MEMBERSHIP_ID_ATTEMPTS):
        if get_member_by_membership_id(db, candidate) is None:
            return candidate
        random_suffix = f"{secrets.randbelow(1_000_000):06d}"
        candidate = build_membership_id(organization_name, first_name, last_name, suffix=random_suffix)
    logger.error(f"[Members] Could not allocate a membership id for {first_name} {last_name}")
    raise InternalServerException(detail="Could not allocate a membership ID. Please try again.")


# ── Registration ──────────────────────────────────────────────────────────────

def register_member(db: Session, body: MemberRegisterRequest) -> Tuple[Member, Optional[str]]:
    """
    Store a pending membership application.

    Returns the member and the generated temporary password, which is
    ``None`` when the applicant chose their own.
    """
    require_fields(body.model_dump(), MEMBER_REQUIRED_FIELDS)

    email = body.email.strip().lower()
    phone = normalize_contact(body.phone, OTPChannel.PHONE)
    if not is_valid_email(email):
        raise InvalidInputException(detail="Invalid email format")
    if body.password:
        problem = password_problem(body.password)
        if problem:
            raise InvalidInputException(detail=problem)

    require_verified_contact(body.verification_token, OTPPurpose.MEMBER_REGISTRATION, email, phone)
    org = get_active_organization(db, body.organization_id)

    duplicate = (
        db.query(Member)
        .filter(or_(func.lower(Member.email) == email, Member.phone == phone))
        .first()
    )
    if duplicate:
        raise ConflictException(detail="A member with this email or phone already exists")

    temporary_password = None if body.password else generate_temporary_password()
    member = Member(
        membership_id=generate_membership_id(db, org.name, body.first_name, body.last_name),
        organization_id=org.id,
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        email=email,
        phone=phone,
        address=body.address.strip(),
        password_hash=get_password_hash(body.password or temporary_password),
        designation=body.designation,
        experience=body.experience,
        achievements=body.achievements,
        payment_method=body.payment_method,
        status=MemberStatus.PENDING,
    )

    try:
        db.add(member)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException(detail="A member with this email, phone or membership ID already exists")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[Members] Could not store application for {email}: {exc}")
        raise DatabaseException(detail="Registration failed. Please try again later.")

    db.refresh(member)
    log_workflow_event(
        "member-register", "OK", f"{member.membership_id} ({org.name})",
        actor_id=member.id, actor_contact=email,
    )

    try:
        if not send_member_registration_email(
            member.email, member.full_name, member.membership_id, org.name, temporary_password
        ):
            logger.warning(f"[Members] Registration email to {member.email} was not delivered")
    except EmailConfigurationError as exc:
        logger.warning(f"[Members] Registration email skipped: {exc}")

    return member, temporary_password


# ── Login ─────────────────────────────────────────────────────────────────────

def _session(db: Session, member: Member, message: str) -> MemberLoginOutcome:
    access = ACCESS_FULL if member.has_full_access else ACCESS_LIMITED
    touch_last_login(db, member)
    log_workflow_event("member-login", "OK", f"{member.membership_id} access={access}", actor_id=member.id)
    return MemberLoginOutcome(
        member=member,
        message=message,
        token=create_member_token(member, access),
        access=access,
        redirect_url=FULL_DASHBOARD if access == ACCESS_FULL else PENDING_DASHBOARD,
        restrictions=[] if access == ACCESS_FULL else list(PENDING_RESTRICTIONS),
    )


def _login_contact(member: Member) -> Tuple[str, OTPChannel]:
    """Phone when an SMS transport is available, otherwise the member's email"""
    if sms_available():
        return member.phone, OTPChannel.PHONE
    return member.email, OTPChannel.EMAIL


def login_member(db: Session, membership_id: str, password: str) -> MemberLoginOutcome:
    member = authenticate_member(db, membership_id, password)
    if member is None:
        log_workflow_event(
            "member-login", "REJECTED", membership_id.strip(), level=logging.WARNING,
        )
        raise UnauthorizedException(detail="Invalid membership ID or password")

    if member.status == MemberStatus.REJECTED:
        raise ForbiddenException(detail="Your membership application was rejected. Contact your organization.")

    if member.status == MemberStatus.PENDING:
        return _session(db, member, "Login successful. Your application is awaiting approval.")

    if not settings.MEMBER_LOGIN_OTP:
        return _session(db, member, "Login successful")

    contact, channel = _login_contact(member)
    issue = issue_otp(
        db, contact, channel, OTPPurpose.MEMBER_LOGIN,
        expire_minutes=settings.MEMBER_LOGIN_OTP_EXPIRE_MINUTES,
    )
    if channel == OTPChannel.PHONE:
        return MemberLoginOutcome(
            member=member,
            message="A verification code was sent to your registered phone number",
            otp_required=True,
            otp_channel=channel.value,
            masked_phone=mask_phone(member.phone),
            expires_in_minutes=issue.expires_in_minutes,
        )
    return MemberLoginOutcome(
        member=member,
        message="A verification code was sent to your registered email address",
        otp_required=True,
        otp_channel=channel.value,
        masked_email=mask_email(member.email),
        expires_in_minutes=issue.expires_in_minutes,
    )


def verify_member_login(db: Session, membership_id: str, otp: str) -> MemberLoginOutcome:
    member = get_member_by_membership_id(db, membership_id)
    if member is None:
        raise UnauthorizedException(detail="Invalid membership ID")
    if not member.has_full_access:
        raise ForbiddenException(detail="Login verification is only required for approved members")

    contact, channel = _login_contact(member)
    if not verify_otp(db, contact, otp, channel, OTPPurpose.MEMBER_LOGIN):
        raise InvalidOrExpiredOTPException()
    return _session(db, member, "Login successful")


def change_member_password(db: Session, member: Member, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, member.password_hash):
        raise BadRequestException(detail="Incorrect current password")
    member.password_hash = get_password_hash(new_password)
    db.commit()
    log_workflow_event("member-password", "OK", member.membership_id, actor_id=member.id)


# ── Admin review ──────────────────────────────────────────────────────────────

def list_members(db: Session, admin: Admin, status: Optional[MemberStatus] = None,
                 organization_id: Optional[int] = None) -> List[Member]:
    """Admins see their own organization; the superadmin sees all or filters by ``organization_id``"""
    query = db.query(Member).options(joinedload(Member.organization))
    if not admin.is_super_admin:
        if admin.organization_id is None:
            return []
        query = query.filter(Member.organization_id == admin.organization_id)
    elif organization_id is not None:
        query = query.filter(Member.organization_id == organization_id)
    if status is not None:
        query = query.filter(Member.status == status)
    return query.order_by(Member.created_at.desc(), Member.id.desc()).all()


def review_member(db: Session, member_id: int, reviewer: Admin, approve: bool) -> Member:
    member = db.query(Member).filter(Member.id == member_id).first()
    if member is None:
        raise NotFoundException(detail=f"Member {member_id} not found")
    if not reviewer.can_manage_organization(member.organization_id):
        raise ForbiddenException(detail="You can only review members of your own organization")

    new_status = MemberStatus.APPROVED if approve else MemberStatus.REJECTED
    claimed = (
        db.query(Member)
        .filter(Member.id == member_id, Member.status == MemberStatus.PENDING)
        .update(
            {
                "status": new_status,
                "reviewed_at": datetime.now(timezone.utc),
                "reviewed_by": reviewer.id,
            },
            synchronize_session=False,
        )
    )
    if claimed != 1:
        db.rollback()
        raise AlreadyProcessedException(detail=f"Member {member_id} has already been reviewed")
    db.commit()

    member = db.query(Member).options(joinedload(Member.organization)).filter(Member.id == member_id).one()
    log_workflow_event(
        "member-approve" if approve else "member-reject", "OK", member.membership_id,
        actor_id=reviewer.id, actor_contact=member.email,
    )

    try:
        if not send_member_status_email(member.email, member.full_name, member.membership_id, approve):
            logger.warning(f"[Members] Status email to {member.email} was not delivered")
    except EmailConfigurationError as exc:
        logger.warning(f"[Members] Status email skipped: {exc}")

    return member


# ── Organization roster ───────────────────────────────────────────────────────

def list_organization_members(db: Session, organization_id: int, viewer: Union[Admin, Member]) -> List[Member]:
    """
    Approved and active members of one organization, by name.

    Visible to admins who manage the organization and to fellow members
    with full access.
    """
    if isinstance(viewer, Admin):
        if not viewer.can_manage_organization(organization_id):
            raise ForbiddenException(detail="You can only view the roster of your own organization")
    elif viewer.organization_id != organization_id:
        raise ForbiddenException(detail="You can only view the roster of your own organization")
    elif not viewer.has_full_access:
        raise ForbiddenException(detail=PENDING_RESTRICTIONS[0])

    return (
        db.query(Member)
        .filter(
            Member.organization_id == organization_id,
            Member.status.in_((MemberStatus.APPROVED, MemberStatus.ACTIVE)),
        )
        .order_by(Member.last_name, Member.first_name, Member.id)
        .all()
    )
