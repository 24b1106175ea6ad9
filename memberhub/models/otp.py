"""OTPEntry: one-time codes proving control of an email address or phone number."""
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Enum as SQLEnum
from sqlalchemy.sql import func

from memberhub.db.base import Base


class OTPChannel(str, Enum):
    EMAIL = "email"
    PHONE = "phone"


class OTPPurpose(str, Enum):
    ADMIN_REGISTRATION  = "admin_registration"
    MEMBER_REGISTRATION = "member_registration"
    MEMBER_LOGIN        = "member_login"


class OTPEntry(Base):
    """
    Holds a 6-digit code issued to a contact for one purpose.

    Lifecycle
    ---------
    1. Code issued            → row inserted (is_used=False).
    2. Matching code entered  → is_used=True, used_at stamped.
    3. Wrong code entered     → failed_attempts incremented on every live row
                                for the same (contact, channel, purpose).
    Rows are never deleted; expired rows are simply ignored.

    Several live rows may exist for one contact; any of them verifies.
    """

    __tablename__ = "otp_entries"
    __table_args__ = (
        Index("ix_otp_entries_lookup", "contact", "channel", "purpose"),
    )

    id              = Column(Integer, primary_key=True, autoincrement=True)
    contact         = Column(String(255), nullable=False)
    code            = Column(String(6),   nullable=False)

    channel         = Column(
        SQLEnum(OTPChannel, name="otpchannel", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    purpose         = Column(
        SQLEnum(OTPPurpose, name="otppurpose", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )

    expires_at      = Column(DateTime(timezone=True), nullable=False)
    is_used         = Column(Boolean, default=False, nullable=False)
    used_at         = Column(DateTime(timezone=True), nullable=True)
    failed_attempts = Column(Integer, default=0, nullable=False)
    created_at      = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<OTPEntry(id={self.id}, contact={self.contact!r}, channel={self.channel}, "
            f"purpose={self.purpose}, expires_at={self.expires_at}, is_used={self.is_used})>"
        )
