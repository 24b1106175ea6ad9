"""Organization schemas"""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from memberhub.schemas.base import CamelModel


class OrganizationCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)


class OrganizationUpdate(CamelModel):
    """All fields are optional: only provided fields are updated."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class OrganizationResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    is_active: bool
    created_at: datetime
