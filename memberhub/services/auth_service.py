"""Authentication service with password hashing and JWT"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import secrets
import string

from passlib.context import CryptContext
from jose import JWTError, jwt
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from memberhub.core.config import settings
from memberhub.models.admin import Admin, AdminRole
from memberhub.models.member import Member
from memberhub.models.otp import OTPChannel, OTPPurpose
from memberhub.schemas.auth_schemas import TokenData

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)

ROLE_MEMBER = "member"
ACCESS_FULL = "full"
ACCESS_LIMITED = "limited"

_VERIFICATION_TOKEN_TYPE = "contact_verification"
_ACCESS_TOKEN_TYPE = "access"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a hashed password"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.error("Stored password hash is not a recognised bcrypt hash")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt at the configured cost"""
    return pwd_context.hash(password)


def generate_temporary_password(length: int = 8) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


# ── Session tokens ────────────────────────────────────────────────────────────

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "typ": _ACCESS_TOKEN_TYPE})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_admin_token(admin: Admin) -> str:
    return create_access_token({
        "sub": str(admin.id),
        "username": admin.username,
        "role": admin.role.value,
    })


def create_member_token(member: Member, access: str) -> str:
    return create_access_token({
        "sub": str(member.id),
        "membershipId": member.membership_id,
        "role": ROLE_MEMBER,
        "access": access,
    })


def decode_access_token(token: Optional[str]) -> Optional[TokenData]:
    """
    Decode and validate a JWT access token
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info(f"JWT decode error: {str(e)}")
        return None

    if payload.get("typ") != _ACCESS_TOKEN_TYPE:
        return None

    try:
        subject_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        return None

    return TokenData(
        subject_id=subject_id,
        role=payload.get("role"),
        username=payload.get("username"),
        membership_id=payload.get("membershipId"),
        access=payload.get("access"),
    )


# ── Contact verification tokens ───────────────────────────────────────────────

def create_verification_token(contact: str, channel: OTPChannel, purpose: OTPPurpose) -> str:
    """
    Mint a short-lived proof that *contact* passed OTP verification for
    *purpose*. Only this server can produce one.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.VERIFICATION_TOKEN_EXPIRE_MINUTES)
    claims = {
        "typ": _VERIFICATION_TOKEN_TYPE,
        "contact": contact,
        "channel": channel.value,
        "purpose": purpose.value,
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_verification_token(token: Optional[str], purpose: OTPPurpose) -> Optional[dict]:
    """Return the claims when *token* is a valid, unexpired proof for *purpose*"""
    if not token:
        return None
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info(f"Verification token rejected: {str(e)}")
        return None

    if claims.get("typ") != _VERIFICATION_TOKEN_TYPE or claims.get("purpose") != purpose.value:
        return None
    if not claims.get("contact") or claims.get("channel") not in {c.value for c in OTPChannel}:
        return None
    return claims


# ── Lookups & authentication ──────────────────────────────────────────────────

def get_admin_by_id(db: Session, admin_id: int) -> Optional[Admin]:
    return db.query(Admin).filter(Admin.id == admin_id).first()


def get_admin_by_login(db: Session, login: str) -> Optional[Admin]:
    """Find an admin by username or email (case-insensitive email)"""
    return (
        db.query(Admin)
        .filter(or_(Admin.username == login, func.lower(Admin.email) == login.lower()))
        .first()
    )


def get_member_by_id(db: Session, member_id: int) -> Optional[Member]:
    return db.query(Member).filter(Member.id == member_id).first()


def get_member_by_membership_id(db: Session, membership_id: str) -> Optional[Member]:
    return db.query(Member).filter(Member.membership_id == membership_id.strip()).first()


def authenticate_admin(db: Session, login: str, password: str, role: AdminRole) -> Optional[Admin]:
    """
    Authenticate an admin of exactly *role*. Returns None for unknown login,
    wrong password or a different role so callers cannot tell them apart.
    """
    admin = get_admin_by_login(db, login.strip())
    if not admin or admin.role != role:
        return None
    if not verify_password(password, admin.password_hash):
        return None
    return admin


def authenticate_member(db: Session, membership_id: str, password: str) -> Optional[Member]:
    member = get_member_by_membership_id(db, membership_id)
    if not member:
        return None
    if not verify_password(password, member.password_hash):
        return None
    return member


def touch_last_login(db: Session, account) -> None:
    account.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(account)
