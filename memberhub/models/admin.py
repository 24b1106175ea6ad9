"""Admin model: live login accounts for admins and the superadmin"""
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from memberhub.db.base import Base


class AdminRole(str, Enum):
    """Admin role enumeration"""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"


class AdminStatus(str, Enum):
    APPROVED = "approved"
    SUSPENDED = "suspended"


class Admin(Base):
    """
    Admin account. Regular admins are created only by approving an
    ``AdminRequest``; the superadmin is seeded from configuration.
    """
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)

    role = Column(
        SQLEnum(AdminRole, name="adminrole", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=AdminRole.ADMIN,
    )
    level = Column(String(100), nullable=True)
    experience = Column(Text, nullable=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True, index=True)
    admin_request_id = Column(Integer, unique=True, nullable=True)  # source request; None for the seeded superadmin

    status = Column(
        SQLEnum(AdminStatus, name="adminstatus", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=AdminStatus.APPROVED,
    )
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    organization = relationship("Organization")

    def __repr__(self):
        return f"<Admin(id={self.id}, username='{self.username}', role='{self.role}')>"

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN

    @property
    def organization_name(self):
        return self.organization.name if self.organization else None

    def can_manage_organization(self, organization_id: int) -> bool:
        """Superadmin manages every organization; an admin only their own"""
        return self.is_super_admin or self.organization_id == organization_id
