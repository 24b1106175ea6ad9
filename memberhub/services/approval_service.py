"""Superadmin review of admin applications"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from memberhub.errors.exceptions import (
    AlreadyProcessedException,
    ConflictException,
    DatabaseException,
    EmailConfigurationError,
    NotFoundException,
)
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.models.admin_request import AdminRequest, RequestStatus
from memberhub.utils.email import send_admin_approved_email, send_admin_rejected_email
from memberhub.utils.logger import log_workflow_event

logger = logging.getLogger(__name__)


def get_admin_request(db: Session, request_id: int) -> Optional[AdminRequest]:
    return (
        db.query(AdminRequest)
        .options(joinedload(AdminRequest.organization))
        .filter(AdminRequest.id == request_id)
        .first()
    )


def list_admin_requests(db: Session, status: Optional[RequestStatus] = None) -> List[AdminRequest]:
    query = db.query(AdminRequest).options(joinedload(AdminRequest.organization))
    if status is not None:
        query = query.filter(AdminRequest.status == status)
    return query.order_by(AdminRequest.requested_at.desc(), AdminRequest.id.desc()).all()


def list_admins(db: Session) -> List[Admin]:
    return (
        db.query(Admin)
        .options(joinedload(Admin.organization))
        .order_by(Admin.created_at.desc(), Admin.id.desc())
        .all()
    )


def _claim_pending(db: Session, request_id: int, new_status: RequestStatus,
                   reviewer_id: int, note: Optional[str] = None) -> None:
    """
    Move a request out of PENDING. The conditional UPDATE is the only
    guard: of two concurrent reviewers exactly one sees rowcount == 1.
    Does not commit.
    """
    claimed = (
        db.query(AdminRequest)
        .filter(AdminRequest.id == request_id, AdminRequest.status == RequestStatus.PENDING)
        .update(
            {
                "status": new_status,
                "reviewed_at": datetime.now(timezone.utc),
                "reviewed_by": reviewer_id,
                "review_note": note,
            },
            synchronize_session=False,
        )
    )
    if claimed == 1:
        return

    db.rollback()
    if db.query(AdminRequest.id).filter(AdminRequest.id == request_id).first() is None:
        raise NotFoundException(detail=f"Admin request {request_id} not found")
    raise AlreadyProcessedException(detail=f"Admin request {request_id} has already been processed")


def approve_admin_request(db: Session, request_id: int, reviewer: Admin) -> Tuple[Admin, AdminRequest]:
    """
    Turn a pending application into a live admin account.

    The new ``Admin`` gets the applicant's own username and password hash.
    Status change and account insert commit together or not at all.
    """
    _claim_pending(db, request_id, RequestStatus.APPROVED, reviewer.id)

    request = db.query(AdminRequest).filter(AdminRequest.id == request_id).one()
    admin = Admin(
        username=request.username,
        email=request.email,
        password_hash=request.password_hash,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        role=AdminRole.ADMIN,
        level=request.level,
        experience=request.experience,
        organization_id=request.organization_id,
        admin_request_id=request.id,
        status=AdminStatus.APPROVED,
        is_active=True,
    )

    try:
        db.add(admin)
        db.flush()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        log_workflow_event(
            "admin-approve", "CONFLICT", f"request {request_id}: {exc.orig}",
            actor_id=reviewer.id, level=logging.WARNING,
        )
        raise ConflictException(
            detail="An admin account with this username or email already exists; the request is still pending"
        )
    except SQLAlchemyError as exc:
        db.rollback()
        log_workflow_event(
            "admin-approve", "FAILED", f"request {request_id}: {exc}",
            actor_id=reviewer.id, level=logging.ERROR,
        )
        raise DatabaseException(detail="Approval failed; the request is still pending")

    db.refresh(admin)
    request = get_admin_request(db, request_id)
    log_workflow_event(
        "admin-approve", "OK", f"request {request_id} -> admin {admin.id} ({admin.username})",
        actor_id=reviewer.id, actor_contact=admin.email,
    )

    try:
        if not send_admin_approved_email(
            admin.email, f"{admin.first_name} {admin.last_name}", admin.username, admin.organization_name
        ):
            logger.warning(f"[Approval] Approval email to {admin.email} was not delivered")
    except EmailConfigurationError as exc:
        logger.warning(f"[Approval] Approval email skipped: {exc}")

    return admin, request


def reject_admin_request(db: Session, request_id: int, reviewer: Admin,
                         reason: Optional[str] = None) -> AdminRequest:
    _claim_pending(db, request_id, RequestStatus.REJECTED, reviewer.id, note=reason)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[Approval] Could not reject request {request_id}: {exc}")
        raise DatabaseException(detail="Rejection failed; the request is still pending")

    request = get_admin_request(db, request_id)
    log_workflow_event(
        "admin-reject", "OK", f"request {request_id}",
        actor_id=reviewer.id, actor_contact=request.email,
    )

    try:
        if not send_admin_rejected_email(request.email, f"{request.first_name} {request.last_name}", reason):
            logger.warning(f"[Approval] Rejection email to {request.email} was not delivered")
    except EmailConfigurationError as exc:
        logger.warning(f"[Approval] Rejection email skipped: {exc}")

    return request
