"""OTP issuance and verification for email and phone contacts."""
from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from memberhub.core.config import settings
from memberhub.errors.exceptions import (
    DatabaseException,
    DeliveryUnavailableException,
    EmailConfigurationError,
    TooManyAttemptsException,
)
from memberhub.models.otp import OTPChannel, OTPEntry, OTPPurpose
from memberhub.utils.email import send_otp_email
from memberhub.utils.logger import log_workflow_event
from memberhub.utils.sms import send_sms_otp

logger = logging.getLogger(__name__)

PURPOSE_LABELS = {
    OTPPurpose.ADMIN_REGISTRATION:  "Admin Registration",
    OTPPurpose.MEMBER_REGISTRATION: "Member Registration",
    OTPPurpose.MEMBER_LOGIN:        "Member Login",
}

_PHONE_MASK = re.compile(r"(\+?\d{2,3})\d+(\d{4})")


@dataclass
class OTPIssue:
    contact: str
    channel: OTPChannel
    purpose: OTPPurpose
    expires_at: datetime
    expires_in_minutes: int
    delivered: bool


# ── Helpers ───────────────────────────────────────────────────────────────────

def generate_otp() -> str:
    """Return a uniformly random 6-digit code in [100000, 999999]."""
    return str(100000 + secrets.randbelow(900000))


def normalize_contact(contact: str, channel: OTPChannel) -> str:
    """Emails compare case-insensitively; phones ignore spaces and dashes."""
    contact = (contact or "").strip()
    if channel == OTPChannel.EMAIL:
        return contact.lower()
    return re.sub(r"[\s\-().]", "", contact)


def mask_phone(phone: str) -> str:
    """``+8801712345678`` → ``+880****5678``"""
    phone = normalize_contact(phone, OTPChannel.PHONE)
    masked = _PHONE_MASK.sub(r"\1****\2", phone)
    if masked == phone:
        return "****" + phone[-2:]
    return masked


def mask_email(email: str) -> str:
    """``jane.doe@example.com`` → ``ja****@example.com``"""
    local, _, domain = normalize_contact(email, OTPChannel.EMAIL).partition("@")
    return f"{local[:2]}****@{domain}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _live_entries(db: Session, contact: str, channel: OTPChannel, purpose: OTPPurpose):
    return db.query(OTPEntry).filter(
        OTPEntry.contact == contact,
        OTPEntry.channel == channel,
        OTPEntry.purpose == purpose,
        OTPEntry.is_used == False,  # noqa: E712
        OTPEntry.expires_at > _now(),
    )


# ── Issue ─────────────────────────────────────────────────────────────────────

def _dispatch(contact: str, code: str, channel: OTPChannel, purpose: OTPPurpose, minutes: int) -> bool:
    """Send *code* out of band. Returns whether it actually reached a transport."""
    if channel == OTPChannel.EMAIL:
        try:
            sent = send_otp_email(contact, code, PURPOSE_LABELS[purpose], minutes)
        except EmailConfigurationError as exc:
            logger.error(f"[OTP] {exc}")
            raise DeliveryUnavailableException(
                detail="Email delivery is not configured on this server. Please contact support."
            )
        if not sent:
            raise DeliveryUnavailableException(
                detail="Failed to send the verification code to your email. Please try again."
            )
        return True

    if not send_sms_otp(contact, code):
        raise DeliveryUnavailableException(
            detail="SMS delivery is not available. Please verify with your email address instead."
        )
    # Log-only transport: the code never left the server.
    return False


def issue_otp(
    db: Session,
    contact: str,
    channel: OTPChannel,
    purpose: OTPPurpose,
    expire_minutes: Optional[int] = None,
) -> OTPIssue:
    """
    Persist a fresh code for (contact, channel, purpose), then dispatch it.

    The row is committed before dispatch; a dispatch failure raises
    ``DeliveryUnavailableException`` but the stored code stays valid.
    Earlier codes for the same contact are left untouched.
    """
    contact = normalize_contact(contact, channel)
    minutes = expire_minutes or settings.OTP_EXPIRE_MINUTES
    code = generate_otp()
    expires_at = _now() + timedelta(minutes=minutes)

    try:
        db.add(OTPEntry(
            contact=contact,
            code=code,
            channel=channel,
            purpose=purpose,
            expires_at=expires_at,
            is_used=False,
            failed_attempts=0,
        ))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[OTP] Could not store {purpose.value} code for {contact}: {exc}")
        raise DatabaseException(detail="Failed to generate verification code. Please try again.")

    delivered = _dispatch(contact, code, channel, purpose, minutes)
    log_workflow_event(
        "otp-issue", "OK", f"{purpose.value} via {channel.value}",
        actor_contact=contact,
    )
    return OTPIssue(
        contact=contact,
        channel=channel,
        purpose=purpose,
        expires_at=expires_at,
        expires_in_minutes=minutes,
        delivered=delivered,
    )


# ── Verify ────────────────────────────────────────────────────────────────────

def verify_otp(db: Session, contact: str, code: str, channel: OTPChannel, purpose: OTPPurpose) -> bool:
    """
    True iff an unused, unexpired row matches contact + channel + purpose + code.
    The matching row is consumed.

    A wrong code counts against every live row for the contact. Once the
    newest live row reaches ``OTP_MAX_ATTEMPTS`` failures the contact is
    locked out (HTTP 429) until a new code is issued.
    """
    contact = normalize_contact(contact, channel)
    code = (code or "").strip()
    max_attempts = settings.OTP_MAX_ATTEMPTS

    newest = _live_entries(db, contact, channel, purpose).order_by(OTPEntry.id.desc()).first()
    if newest is None:
        log_workflow_event("otp-verify", "REJECTED", "no live code", actor_contact=contact, level=logging.WARNING)
        return False

    if newest.failed_attempts >= max_attempts:
        log_workflow_event("otp-verify", "LOCKED", purpose.value, actor_contact=contact, level=logging.WARNING)
        raise TooManyAttemptsException()

    match = (
        _live_entries(db, contact, channel, purpose)
        .filter(OTPEntry.code == code, OTPEntry.failed_attempts < max_attempts)
        .order_by(OTPEntry.id.desc())
        .first()
    )

    if match is not None:
        consumed = (
            db.query(OTPEntry)
            .filter(OTPEntry.id == match.id, OTPEntry.is_used == False)  # noqa: E712
            .update({"is_used": True, "used_at": _now()}, synchronize_session=False)
        )
        db.commit()
        if consumed == 1:
            log_workflow_event("otp-verify", "OK", purpose.value, actor_contact=contact)
            return True
        # Lost a race with a concurrent verification of the same code.
        return False

    _live_entries(db, contact, channel, purpose).update(
        {"failed_attempts": OTPEntry.failed_attempts + 1}, synchronize_session=False
    )
    db.commit()
    log_workflow_event("otp-verify", "REJECTED", "wrong code", actor_contact=contact, level=logging.WARNING)
    return False
