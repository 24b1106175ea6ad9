"""Member endpoints - membership application and self-service"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from memberhub.core.dependencies import get_db
from memberhub.middleware.auth import get_current_member
from memberhub.models.member import Member
from memberhub.models.otp import OTPPurpose
from memberhub.schemas.auth_schemas import PasswordChange
from memberhub.schemas.member_schemas import (
    MemberProfileUpdate,
    MemberRegisterRequest,
    MemberRegisterResponse,
    MemberResponse,
)
from memberhub.schemas.registration_schemas import (
    ContactOTPRequest,
    ContactOTPVerifyRequest,
    OTPSentResponse,
    OTPVerifiedResponse,
)
from memberhub.services.member_service import change_member_password, register_member
from memberhub.services.profile_service import update_member_profile
from memberhub.services.registration_service import send_contact_otp, verify_contact_otp

router = APIRouter()


@router.post("/send-otp", response_model=OTPSentResponse)
async def member_send_otp(body: ContactOTPRequest, db: Session = Depends(get_db)):
    """
    ## Send a verification code before applying (Step 1 of 3)

    **Role:** Public.

    `{ "verificationType": "email" | "phone", "email" | "phone": "..." }`
    """
    issue = send_contact_otp(db, body.verification_type, body.email, body.phone, OTPPurpose.MEMBER_REGISTRATION)
    return OTPSentResponse(
        message=f"Verification code sent to your {issue.channel.value}",
        verification_type=issue.channel.value,
        contact=issue.contact,
        expires_in_minutes=issue.expires_in_minutes,
        delivered=issue.delivered,
    )


@router.post("/verify-otp", response_model=OTPVerifiedResponse)
async def member_verify_otp(body: ContactOTPVerifyRequest, db: Session = Depends(get_db)):
    """
    ## Verify the code (Step 2 of 3)

    Returns the `verificationToken` required by **POST /members/register**.
    """
    token, contact, channel = verify_contact_otp(
        db, body.verification_type, body.email, body.phone, body.otp, OTPPurpose.MEMBER_REGISTRATION,
    )
    return OTPVerifiedResponse(
        verification_token=token,
        verified_contact=contact,
        verification_type=channel.value,
    )


@router.post("/register", response_model=MemberRegisterResponse, status_code=status.HTTP_201_CREATED)
async def member_register(body: MemberRegisterRequest, db: Session = Depends(get_db)):
    """
    ## Submit a membership application (Step 3 of 3)

    ### Required fields (JSON body)
    | Field             | Type    | Description                        |
    |-------------------|---------|------------------------------------|
    | organizationId    | integer | Organization to join               |
    | firstName         | string  |                                    |
    | lastName          | string  |                                    |
    | email             | string  |                                    |
    | phone             | string  |                                    |
    | address           | string  |                                    |
    | verificationToken | string  | From **POST /members/verify-otp**  |

    Optional: `designation`, `experience`, `achievements`, `paymentMethod`, `password`.
    Without a password a temporary one is generated, returned once and emailed.

    - HTTP 201 → `{ applicationId, membershipId, status: "pending", temporaryPassword? }`.
    - HTTP 400 → missing fields, unverified contact or bad organization.
    - HTTP 409 → email or phone already registered.
    """
    member, temporary_password = register_member(db, body)
    return MemberRegisterResponse(
        message="Membership application submitted successfully! You can log in with limited access until approved.",
        application_id=member.id,
        membership_id=member.membership_id,
        status=member.status,
        temporary_password=temporary_password,
        organization_name=member.organization_name,
        submitted_at=member.created_at,
    )


@router.get("/me", response_model=MemberResponse)
async def get_member_profile(current_member: Member = Depends(get_current_member)):
    """Current member profile; available with limited access too"""
    return current_member


@router.put("/me", response_model=MemberResponse)
async def update_member_profile_endpoint(
    body: MemberProfileUpdate,
    current_member: Member = Depends(get_current_member),
    db: Session = Depends(get_db)
):
    """
    ## Update own profile

    Accepted fields: `phone`, `address`, `designation`, `experience`, `achievements`.
    Fields left out of the body are unchanged.

    - HTTP 400 → no accepted field sent, or `phone`/`address` blanked.
    - HTTP 409 → the phone number belongs to another member.
    """
    return update_member_profile(db, current_member, body)


@router.post("/change-password")
async def change_password(
    password_data: PasswordChange,
    current_member: Member = Depends(get_current_member),
    db: Session = Depends(get_db)
):
    """
    ## Change the member's password

    HTTP 400 → "Incorrect current password".
    """
    change_member_password(db, current_member, password_data.current_password, password_data.new_password)
    return {"success": True, "message": "Password changed successfully"}
