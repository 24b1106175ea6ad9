"""Email utility: sends transactional emails via SMTP (TLS)."""
from __future__ import annotations

import logging
import smtplib
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from memberhub.core.config import settings
from memberhub.errors.exceptions import EmailConfigurationError

logger = logging.getLogger(__name__)


def _build_smtp_connection() -> smtplib.SMTP:
    """Open an authenticated SMTP connection (implicit TLS on 465, STARTTLS otherwise)."""
    if settings.SMTP_PORT == 465:
        conn = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT)
        conn.ehlo()
    else:
        conn = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT)
        conn.ehlo()
        conn.starttls()
        conn.ehlo()
    conn.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
    return conn


def send_email(to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
    """
    Send a transactional email. Returns True on success, False on transport failure.

    Raises
    ------
    EmailConfigurationError
        When SMTP settings are missing. This is raised before any connection
        attempt so a misconfigured server never reports mail as sent.
    """
    missing = settings.missing_smtp_settings()
    if missing:
        logger.error(f"[Email] Refusing to send '{subject}' to {to}: missing {', '.join(missing)}")
        raise EmailConfigurationError(missing)

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.EMAIL_SENDER_NAME} <{settings.sender_address}>"
        msg["To"] = to

        if plain_body:
            msg.attach(MIMEText(plain_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with _build_smtp_connection() as conn:
            refused = conn.sendmail(settings.sender_address, [to], msg.as_string())

        if refused:
            logger.error(f"[Email] Recipient refused for '{subject}': {refused}")
            return False

        logger.info(f"[Email] Sent '{subject}' → {to}")
        return True

    except (smtplib.SMTPException, OSError) as exc:
        logger.error(f"[Email] Failed to send '{subject}' to {to}: {exc}")
        return False


# ── Templates ─────────────────────────────────────────────────────────────────

_LAYOUT = """
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>
    body {{ font-family: 'Segoe UI', Arial, sans-serif; background: #f5f5f5; margin: 0; padding: 0; }}
    .container {{ max-width: 560px; margin: 40px auto; background: #fff;
                  border-radius: 12px; padding: 32px; box-shadow: 0 4px 20px rgba(0,0,0,.1); }}
    .logo {{ font-size: 26px; font-weight: 700; color: #4f46e5; margin-bottom: 24px; }}
    .otp {{ font-size: 36px; font-weight: 800; letter-spacing: 12px; color: #fff;
            background: #4f46e5; padding: 16px 32px; border-radius: 12px;
            display: inline-block; margin: 16px 0; font-family: 'Courier New', monospace; }}
    .box {{ background: #f3f4f6; border-left: 4px solid #4f46e5; padding: 16px;
            border-radius: 8px; margin: 20px 0; }}
    .footer {{ margin-top: 24px; font-size: 12px; color: #9ca3af; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="logo">{sender}</div>
    {content}
    <div class="footer">
      &copy; {year} {sender}. This is an automated message.
    </div>
  </div>
</body>
</html>
"""


def _render(content: str) -> str:
    return _LAYOUT.format(
        sender=settings.EMAIL_SENDER_NAME,
        year=datetime.now(timezone.utc).year,
        content=content,
    )


# ── Convenience senders ───────────────────────────────────────────────────────

def send_otp_email(to: str, otp: str, purpose_label: str, expires_minutes: int) -> bool:
    """Send a 6-digit verification code."""
    subject = f"{settings.EMAIL_SENDER_NAME} {purpose_label} - Verification Code"
    html_body = _render(f"""
    <p>Hello,</p>
    <p>Use the verification code below to continue your {purpose_label.lower()}.
       The code expires in <strong>{expires_minutes} minutes</strong> and can be used once.</p>
    <div class="otp">{otp}</div>
    <p>If you did not request this code, please ignore this email. Never share it with anyone.</p>
    """)
    plain_body = (
        f"Your {purpose_label.lower()} verification code is: {otp}\n\n"
        f"This code will expire in {expires_minutes} minutes.\n\n"
        f"If you didn't request this code, please ignore this email."
    )
    return send_email(to, subject, html_body, plain_body)


def send_admin_approved_email(to: str, full_name: str, username: str, organization_name: Optional[str]) -> bool:
    """Tell an applicant their admin account is live."""
    subject = f"{settings.EMAIL_SENDER_NAME} - Admin Account Approved"
    org = organization_name or "your organization"
    html_body = _render(f"""
    <p>Hi {full_name},</p>
    <p>Your admin application for <strong>{org}</strong> has been approved.</p>
    <div class="box">
      Username: <strong>{username}</strong><br>
      Password: the password you chose when registering
    </div>
    """)
    plain_body = (
        f"Hi {full_name},\n\nYour admin application for {org} has been approved.\n"
        f"Username: {username}\nPassword: the password you chose when registering\n"
    )
    return send_email(to, subject, html_body, plain_body)


def send_admin_rejected_email(to: str, full_name: str, reason: Optional[str] = None) -> bool:
    subject = f"{settings.EMAIL_SENDER_NAME} - Admin Application Update"
    reason_html = f"<div class=\"box\">{reason}</div>" if reason else ""
    html_body = _render(f"""
    <p>Hi {full_name},</p>
    <p>Your admin application was not approved.</p>
    {reason_html}
    """)
    plain_body = f"Hi {full_name},\n\nYour admin application was not approved.\n{reason or ''}\n"
    return send_email(to, subject, html_body, plain_body)


def send_member_registration_email(
    to: str,
    full_name: str,
    membership_id: str,
    organization_name: str,
    temporary_password: Optional[str] = None,
) -> bool:
    """Confirm a membership application and hand over the login details."""
    subject = f"{settings.EMAIL_SENDER_NAME} - Membership Application Received"
    password_line = (
        f"Temporary password: <strong>{temporary_password}</strong><br>"
        if temporary_password else
        "Password: the password you chose when applying<br>"
    )
    html_body = _render(f"""
    <p>Hi {full_name},</p>
    <p>Your application to join <strong>{organization_name}</strong> has been received
       and is awaiting admin approval.</p>
    <div class="box">
      Membership ID: <strong>{membership_id}</strong><br>
      {password_line}
    </div>
    <p>You can log in now with limited access. Full access is granted once an admin approves your application.</p>
    """)
    plain_body = (
        f"Hi {full_name},\n\nYour application to join {organization_name} is awaiting approval.\n"
        f"Membership ID: {membership_id}\n"
        + (f"Temporary password: {temporary_password}\n" if temporary_password else "")
    )
    return send_email(to, subject, html_body, plain_body)


def send_member_status_email(to: str, full_name: str, membership_id: str, approved: bool) -> bool:
    """Notify a member that their application was approved or rejected."""
    verdict = "approved" if approved else "rejected"
    subject = f"{settings.EMAIL_SENDER_NAME} - Membership {verdict.title()}"
    follow_up = (
        "You now have full access to your member dashboard."
        if approved else
        "Contact your organization for assistance."
    )
    html_body = _render(f"""
    <p>Hi {full_name},</p>
    <p>Your membership application <strong>{membership_id}</strong> has been {verdict}.</p>
    <p>{follow_up}</p>
    """)
    plain_body = f"Hi {full_name},\n\nYour membership application {membership_id} has been {verdict}.\n{follow_up}\n"
    return send_email(to, subject, html_body, plain_body)
