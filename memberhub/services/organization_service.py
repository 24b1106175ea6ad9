"""Organization CRUD"""
from typing import List
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memberhub.errors.exceptions import ConflictException, NotFoundException
from memberhub.models.organization import Organization
from memberhub.schemas.organization_schemas import OrganizationCreate, OrganizationUpdate

logger = logging.getLogger(__name__)


def list_active_organizations(db: Session) -> List[Organization]:
    return (
        db.query(Organization)
        .filter(Organization.is_active == True)  # noqa: E712
        .order_by(Organization.name)
        .all()
    )


def get_organization(db: Session, organization_id: int) -> Organization:
    org = db.query(Organization).filter(Organization.id == organization_id).first()
    if org is None:
        raise NotFoundException(detail=f"Organization {organization_id} not found")
    return org


def _name_taken(db: Session, name: str, exclude_id: int = None) -> bool:
    query = db.query(Organization.id).filter(func.lower(Organization.name) == name.strip().lower())
    if exclude_id is not None:
        query = query.filter(Organization.id != exclude_id)
    return query.first() is not None


def create_organization(db: Session, data: OrganizationCreate) -> Organization:
    if _name_taken(db, data.name):
        raise ConflictException(detail=f"Organization '{data.name}' already exists")

    org = Organization(**data.model_dump())
    org.name = org.name.strip()
    try:
        db.add(org)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException(detail=f"Organization '{data.name}' already exists")
    db.refresh(org)
    logger.info(f"Organization created: {org.name} (id={org.id})")
    return org


def update_organization(db: Session, organization_id: int, data: OrganizationUpdate) -> Organization:
    org = get_organization(db, organization_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name") and _name_taken(db, changes["name"], exclude_id=org.id):
        raise ConflictException(detail=f"Organization '{changes['name']}' already exists")

    for key, value in changes.items():
        setattr(org, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException(detail="Organization name already exists")
    db.refresh(org)
    return org


def deactivate_organization(db: Session, organization_id: int) -> Organization:
    org = get_organization(db, organization_id)
    org.is_active = False
    db.commit()
    db.refresh(org)
    logger.warning(f"Organization deactivated: {org.name} (id={org.id})")
    return org
