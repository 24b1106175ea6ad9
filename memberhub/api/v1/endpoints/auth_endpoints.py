"""Authentication endpoints - admin, superadmin and member sessions"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from memberhub.core.dependencies import get_db
from memberhub.errors.exceptions import ForbiddenException, UnauthorizedException
from memberhub.middleware.auth import get_current_admin
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.schemas.admin_schemas import AdminProfileUpdate, AdminResponse
from memberhub.schemas.auth_schemas import (
    AdminLoginRequest,
    AdminToken,
    MemberLoginRequest,
    MemberLoginResponse,
    MemberOTPVerifyRequest,
    PasswordChange,
)
from memberhub.schemas.member_schemas import MemberResponse
from memberhub.services.auth_service import authenticate_admin, create_admin_token, touch_last_login
from memberhub.services.member_service import MemberLoginOutcome, login_member, verify_member_login
from memberhub.services.profile_service import change_admin_password, update_admin_profile
from memberhub.utils.logger import log_workflow_event

router = APIRouter()
logger = logging.getLogger(__name__)

_DASHBOARDS = {
    AdminRole.SUPER_ADMIN: "/superadmin/dashboard",
    AdminRole.ADMIN: "/admin/dashboard",
}


def _admin_login(db: Session, credentials: AdminLoginRequest, role: AdminRole) -> AdminToken:
    admin = authenticate_admin(db, credentials.username, credentials.password, role)

    if not admin:
        log_workflow_event(
            f"{role.value}-login", "REJECTED", credentials.username.strip(), level=logging.WARNING,
        )
        raise UnauthorizedException(detail="Incorrect username or password")

    if not admin.is_active or admin.status != AdminStatus.APPROVED:
        raise ForbiddenException(detail="This admin account is disabled")

    touch_last_login(db, admin)
    log_workflow_event(f"{role.value}-login", "OK", admin.username, actor_id=admin.id, actor_contact=admin.email)
    return AdminToken(
        access_token=create_admin_token(admin),
        admin=AdminResponse.model_validate(admin),
        redirect_url=_DASHBOARDS[role],
    )


def _member_response(outcome: MemberLoginOutcome) -> MemberLoginResponse:
    return MemberLoginResponse(
        message=outcome.message,
        otp_required=outcome.otp_required,
        otp_channel=outcome.otp_channel,
        masked_phone=outcome.masked_phone,
        masked_email=outcome.masked_email,
        expires_in_minutes=outcome.expires_in_minutes,
        access_token=outcome.token,
        token_type="bearer" if outcome.token else None,
        access_level=outcome.access,
        redirect_url=outcome.redirect_url,
        restrictions=outcome.restrictions,
        member=MemberResponse.model_validate(outcome.member) if outcome.token else None,
    )


@router.post("/admin/login", response_model=AdminToken)
async def admin_login(credentials: AdminLoginRequest, db: Session = Depends(get_db)):
    """
    ## Admin login

    **Role:** Public: no authentication required.

    `username` accepts either the username chosen at registration or the email.

    ### Response
    ```json
    { "accessToken": "<JWT>", "tokenType": "bearer", "admin": { ... }, "redirectUrl": "/admin/dashboard" }
    ```

    - HTTP 401 → unknown user, wrong password, or a superadmin account.
    - HTTP 403 → account disabled.
    """
    return _admin_login(db, credentials, AdminRole.ADMIN)


@router.post("/superadmin/login", response_model=AdminToken)
async def superadmin_login(credentials: AdminLoginRequest, db: Session = Depends(get_db)):
    """Superadmin login; regular admins get 401 here"""
    return _admin_login(db, credentials, AdminRole.SUPER_ADMIN)


@router.get("/me", response_model=AdminResponse)
async def get_current_admin_info(current_admin: Admin = Depends(get_current_admin)):
    """
    ## Current admin or superadmin profile

    **Auth:** `Authorization: Bearer <token>` header required.
    """
    return current_admin


@router.put("/me", response_model=AdminResponse)
async def update_current_admin_profile(
    body: AdminProfileUpdate,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    ## Update own profile (admin or superadmin)

    Accepted fields: `firstName`, `lastName`, `phone`, `experience`. Fields left
    out of the body are unchanged; an empty string clears the field.

    HTTP 400 → none of the accepted fields was sent.
    """
    return update_admin_profile(db, current_admin, body)


@router.post("/change-password")
async def change_admin_password_endpoint(
    password_data: PasswordChange,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Change the admin's or superadmin's password; HTTP 400 on a wrong current password"""
    change_admin_password(db, current_admin, password_data.current_password, password_data.new_password)
    return {"success": True, "message": "Password changed successfully"}


@router.post("/member/login", response_model=MemberLoginResponse)
async def member_login(credentials: MemberLoginRequest, db: Session = Depends(get_db)):
    """
    ## Member login

    **Role:** Public: no authentication required.

    | Member status        | Result                                                        |
    |----------------------|---------------------------------------------------------------|
    | pending              | Token with `accessLevel: "limited"` → `/member/pending-dashboard` |
    | approved / active    | `otpRequired: true` and a code sent to `maskedPhone`, or to `maskedEmail` without SMS |
    | rejected             | HTTP 403                                                       |

    When login OTP is switched off approved members get a full token straight away.
    HTTP 401 → unknown membership ID or wrong password.
    """
    return _member_response(login_member(db, credentials.membership_id, credentials.password))


@router.post("/member/verify-otp", response_model=MemberLoginResponse)
async def member_verify_otp(body: MemberOTPVerifyRequest, db: Session = Depends(get_db)):
    """
    ## Complete member login with the emailed or texted code

    HTTP 200 → token with `accessLevel: "full"` → `/member/dashboard`.
    HTTP 400 → wrong or expired code. HTTP 429 → too many wrong attempts.
    """
    return _member_response(verify_member_login(db, body.membership_id, body.otp))
