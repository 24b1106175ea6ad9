"""Organization: the body that admins run and members join."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from memberhub.db.base import Base


class Organization(Base):
    __tablename__ = "organizations"

    id            = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name          = Column(String(255), unique=True, nullable=False, index=True)
    description   = Column(Text,        nullable=True)
    address       = Column(Text,        nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50),  nullable=True)
    is_active     = Column(Boolean, default=True, nullable=False)

    created_at    = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at    = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r})>"
