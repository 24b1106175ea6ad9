"""AdminRequest: an application to become an organization admin."""
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from memberhub.db.base import Base


class RequestStatus(str, Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AdminRequest(Base):
    """
    Pending admin application, distinct from a live ``Admin`` account.

    ``username`` and ``password_hash`` are the applicant's own credentials and
    are copied verbatim into the ``Admin`` row at approval time.
    """
    __tablename__ = "admin_requests"

    id              = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # ── Applicant ─────────────────────────────────────────────────────────────
    email           = Column(String(255), unique=True, nullable=False, index=True)
    first_name      = Column(String(100), nullable=False)
    last_name       = Column(String(100), nullable=False)
    phone           = Column(String(50),  nullable=False)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)

    # ── Credentials ───────────────────────────────────────────────────────────
    username        = Column(String(50),  unique=True, nullable=False, index=True)
    password_hash   = Column(String(255), nullable=False)

    # ── Profile ───────────────────────────────────────────────────────────────
    experience      = Column(Text,        nullable=True)
    level           = Column(String(100), nullable=True)
    appointer       = Column(String(255), nullable=True)

    # ── Verification ──────────────────────────────────────────────────────────
    verification_type = Column(String(10),  nullable=False)
    verified_contact  = Column(String(255), nullable=False)

    # ── Review ────────────────────────────────────────────────────────────────
    status          = Column(
        SQLEnum(RequestStatus, name="requeststatus", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )
    requested_at    = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    reviewed_at     = Column(DateTime(timezone=True), nullable=True)
    reviewed_by     = Column(Integer, ForeignKey("admins.id"), nullable=True)
    review_note     = Column(Text, nullable=True)

    organization    = relationship("Organization")

    def __repr__(self) -> str:
        return f"<AdminRequest(id={self.id}, username={self.username!r}, status={self.status})>"

    @property
    def organization_name(self):
        return self.organization.name if self.organization else None
