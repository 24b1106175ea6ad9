"""Member: a membership application and, once approved, the member account."""
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from memberhub.db.base import Base


class MemberStatus(str, Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE   = "active"


class Member(Base):
    """
    A member row is created by registration with status PENDING and stays the
    same row through approval. Pending members may log in with limited access.
    """
    __tablename__ = "members"

    id              = Column(Integer, primary_key=True, index=True, autoincrement=True)
    membership_id   = Column(String(50), unique=True, nullable=False, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)

    # ── Identity ──────────────────────────────────────────────────────────────
    first_name      = Column(String(100), nullable=False)
    last_name       = Column(String(100), nullable=False)
    email           = Column(String(255), unique=True, nullable=False, index=True)
    phone           = Column(String(50),  unique=True, nullable=False, index=True)
    address         = Column(Text,        nullable=False)
    password_hash   = Column(String(255), nullable=False)

    # ── Application details ───────────────────────────────────────────────────
    designation     = Column(String(255), nullable=True)
    experience      = Column(Text,        nullable=True)
    achievements    = Column(Text,        nullable=True)
    payment_method  = Column(String(50),  nullable=True)

    status          = Column(
        SQLEnum(MemberStatus, name="memberstatus", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=MemberStatus.PENDING,
        index=True,
    )

    created_at      = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at      = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
    reviewed_at     = Column(DateTime(timezone=True), nullable=True)
    reviewed_by     = Column(Integer, ForeignKey("admins.id"), nullable=True)
    last_login      = Column(DateTime(timezone=True), nullable=True)

    organization    = relationship("Organization")

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, membership_id={self.membership_id!r}, status={self.status})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def organization_name(self):
        return self.organization.name if self.organization else None

    @property
    def has_full_access(self) -> bool:
        return self.status in (MemberStatus.APPROVED, MemberStatus.ACTIVE)
