"""Self-service profile updates for admins and members"""
from typing import Dict, Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from memberhub.errors.exceptions import (
    BadRequestException,
    ConflictException,
    DatabaseException,
    InvalidInputException,
)
from memberhub.models.admin import Admin
from memberhub.models.member import Member
from memberhub.models.otp import OTPChannel
from memberhub.schemas.admin_schemas import AdminProfileUpdate
from memberhub.schemas.member_schemas import MemberProfileUpdate
from memberhub.services.auth_service import get_password_hash, verify_password
from memberhub.services.otp_service import normalize_contact
from memberhub.utils.logger import log_workflow_event

logger = logging.getLogger(__name__)

ADMIN_PROFILE_FIELDS = ("first_name", "last_name", "phone", "experience")
MEMBER_PROFILE_FIELDS = ("phone", "address", "designation", "experience", "achievements")
_MEMBER_NOT_NULL = ("phone", "address")


def _allowed_changes(sent: Dict[str, Optional[str]], allowed) -> Dict[str, Optional[str]]:
    """Trimmed values for allow-listed keys; blank becomes None"""
    changes = {}
    for name in allowed:
        if name in sent:
            value = sent[name]
            if value is not None:
                value = str(value).strip() or None
            changes[name] = value
    if not changes:
        raise BadRequestException(detail="No valid fields to update")
    return changes


def _save(db: Session, target, changes: Dict[str, Optional[str]], label: str):
    for name, value in changes.items():
        setattr(target, name, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException(detail="Another account already uses this phone number")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[Profile] Could not update {label}: {exc}")
        raise DatabaseException(detail="Profile update failed. Please try again.")
    db.refresh(target)
    return target


def update_admin_profile(db: Session, admin: Admin, body: AdminProfileUpdate) -> Admin:
    changes = _allowed_changes(body.model_dump(exclude_unset=True), ADMIN_PROFILE_FIELDS)
    _save(db, admin, changes, f"admin {admin.id}")
    log_workflow_event("admin-profile", "OK", ", ".join(sorted(changes)), actor_id=admin.id)
    return admin


def change_admin_password(db: Session, admin: Admin, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, admin.password_hash):
        raise BadRequestException(detail="Incorrect current password")
    admin.password_hash = get_password_hash(new_password)
    db.commit()
    log_workflow_event("admin-password", "OK", admin.username, actor_id=admin.id)


def update_member_profile(db: Session, member: Member, body: MemberProfileUpdate) -> Member:
    """
    Apply the member's own edits. Name, email, organization and status stay
    under admin control.
    """
    changes = _allowed_changes(body.model_dump(exclude_unset=True), MEMBER_PROFILE_FIELDS)

    cleared = [name for name in _MEMBER_NOT_NULL if name in changes and changes[name] is None]
    if cleared:
        raise InvalidInputException(detail=f"{', '.join(cleared).capitalize()} cannot be empty")

    if "phone" in changes:
        changes["phone"] = normalize_contact(changes["phone"], OTPChannel.PHONE)
        taken = (
            db.query(Member.id)
            .filter(Member.phone == changes["phone"], Member.id != member.id)
            .first()
        )
        if taken:
            raise ConflictException(detail="Another account already uses this phone number")

    _save(db, member, changes, f"member {member.membership_id}")
    log_workflow_event("member-profile", "OK", ", ".join(sorted(changes)), actor_id=member.id)
    return member
