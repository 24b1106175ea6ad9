"""Authentication middleware and dependencies"""
from typing import Union

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from memberhub.core.config import settings
from memberhub.core.dependencies import get_db
from memberhub.errors.exceptions import ForbiddenException, UnauthorizedException
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.models.member import Member, MemberStatus
from memberhub.services.auth_service import ROLE_MEMBER, decode_access_token, get_admin_by_id, get_member_by_id

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/admin/login", auto_error=False)

_ADMIN_ROLES = {role.value for role in AdminRole}


async def get_current_admin(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Admin:
    """Get the admin or superadmin behind a bearer token"""
    token_data = decode_access_token(token)

    if token_data is None or token_data.subject_id is None or token_data.role not in _ADMIN_ROLES:
        raise UnauthorizedException(detail="Could not validate credentials")

    admin = get_admin_by_id(db, admin_id=token_data.subject_id)

    if admin is None or admin.role.value != token_data.role:
        raise UnauthorizedException(detail="Admin not found")

    if not admin.is_active or admin.status != AdminStatus.APPROVED:
        raise ForbiddenException(detail="Inactive admin account")

    return admin


async def require_super_admin(current_admin: Admin = Depends(get_current_admin)) -> Admin:
    if not current_admin.is_super_admin:
        raise ForbiddenException(detail="Insufficient permissions. Required role: super_admin")
    return current_admin


async def get_current_member(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Member:
    """Get the member behind a bearer token; pending members carry limited access"""
    token_data = decode_access_token(token)

    if token_data is None or token_data.subject_id is None or token_data.role != ROLE_MEMBER:
        raise UnauthorizedException(detail="Could not validate credentials")

    member = get_member_by_id(db, member_id=token_data.subject_id)

    if member is None:
        raise UnauthorizedException(detail="Member not found")

    if member.status == MemberStatus.REJECTED:
        raise ForbiddenException(detail="Membership was rejected")

    return member


async def get_current_account(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Union[Admin, Member]:
    """Admin, superadmin or member, depending on the token's role"""
    token_data = decode_access_token(token)
    if token_data is not None and token_data.role == ROLE_MEMBER:
        return await get_current_member(token, db)
    return await get_current_admin(token, db)
