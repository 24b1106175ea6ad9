"""Admin registration endpoints - three-step OTP pipeline"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from memberhub.core.dependencies import get_db
from memberhub.errors.exceptions import InvalidInputException
from memberhub.schemas.registration_schemas import (
    AdminRegistrationRequest,
    AdminRegistrationResponse,
    OTPSentResponse,
    OTPVerifiedResponse,
    RegistrationStep,
)
from memberhub.services.registration_service import (
    complete_admin_registration,
    send_admin_registration_otp,
    verify_admin_registration_otp,
)

router = APIRouter()

_VALID_STEPS = ", ".join(step.value for step in RegistrationStep)


@router.post("")
async def admin_registration(body: AdminRegistrationRequest, db: Session = Depends(get_db)):
    """
    ## Apply to become an organization admin

    **Role:** Public: no authentication required.

    One endpoint, three steps, selected by `step`.

    ### 1. `send-otp`
    | Field            | Type   | Description                        |
    |------------------|--------|------------------------------------|
    | verificationType | string | `email` or `phone`                 |
    | email / phone    | string | The contact matching the type      |

    HTTP 200 → `{ success, message, verificationType, contact, expiresInMinutes, delivered }`.
    HTTP 409 → an admin with this email already exists. HTTP 503 → the code could not be delivered.

    ### 2. `verify-otp`
    Same fields plus `otp`. HTTP 200 → `{ verificationToken, verifiedContact }`.
    HTTP 400 → wrong, expired or already used code. HTTP 429 → too many wrong attempts.

    ### 3. `complete-registration`
    | Field             | Type    | Description                                 |
    |-------------------|---------|---------------------------------------------|
    | organization      | integer | Organization id                             |
    | firstName         | string  |                                             |
    | lastName          | string  |                                             |
    | email             | string  |                                             |
    | phone             | string  |                                             |
    | username          | string  | Kept as the admin login after approval      |
    | password          | string  | Kept (hashed) as the admin password         |
    | verificationType  | string  | `email` or `phone`                          |
    | verificationToken | string  | From step 2                                 |
    | experience, level, appointer, verifiedContact | string | Optional      |

    HTTP 201 → `{ requestId, username, status: "pending", ... }`.
    HTTP 400 → missing fields (each one named), unverified contact or bad organization.
    HTTP 409 → email or username already in use.
    """
    step = (body.step or "").strip().lower()

    if step == RegistrationStep.SEND_OTP.value:
        issue = send_admin_registration_otp(db, body)
        return OTPSentResponse(
            message=f"Verification code sent to your {issue.channel.value}",
            verification_type=issue.channel.value,
            contact=issue.contact,
            expires_in_minutes=issue.expires_in_minutes,
            delivered=issue.delivered,
        )

    if step == RegistrationStep.VERIFY_OTP.value:
        token, contact, channel = verify_admin_registration_otp(db, body)
        return OTPVerifiedResponse(
            verification_token=token,
            verified_contact=contact,
            verification_type=channel.value,
        )

    if step == RegistrationStep.COMPLETE_REGISTRATION.value:
        request = complete_admin_registration(db, body)
        payload = AdminRegistrationResponse(
            message="Registration submitted successfully! Please wait for superadmin approval.",
            request_id=request.id,
            email=request.email,
            username=request.username,
            status=request.status.value,
            verification_type=request.verification_type,
            verified_contact=request.verified_contact,
            submitted_at=request.requested_at,
        )
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=payload.model_dump(mode="json", by_alias=True),
        )

    raise InvalidInputException(detail=f"Invalid step. Valid steps: {_VALID_STEPS}")


@router.get("")
async def admin_registration_info():
    """Describe the registration steps"""
    return {
        "success": True,
        "message": "Admin registration API",
        "steps": [
            {"step": RegistrationStep.SEND_OTP.value,
             "required": ["verificationType", "email or phone"]},
            {"step": RegistrationStep.VERIFY_OTP.value,
             "required": ["verificationType", "email or phone", "otp"]},
            {"step": RegistrationStep.COMPLETE_REGISTRATION.value,
             "required": ["organization", "firstName", "lastName", "email", "phone",
                          "username", "password", "verificationType", "verificationToken"]},
        ],
        "verificationTypes": ["email", "phone"],
    }
