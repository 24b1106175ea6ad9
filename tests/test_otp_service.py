"""
Tests for OTP issuance and verification
"""
from datetime import datetime, timedelta, timezone

import pytest

from memberhub.core.config import settings
from memberhub.errors.exceptions import (
    DeliveryUnavailableException,
    EmailConfigurationError,
    TooManyAttemptsException,
)
from memberhub.models.otp import OTPChannel, OTPEntry, OTPPurpose
from memberhub.services import otp_service
from memberhub.services.otp_service import (
    generate_otp,
    issue_otp,
    mask_email,
    mask_phone,
    normalize_contact,
    verify_otp,
)
from memberhub.utils.email import send_email as real_send_email


EMAIL = 'a@b.com'
PURPOSE = OTPPurpose.ADMIN_REGISTRATION


def _store(db, code='123456', contact=EMAIL, purpose=PURPOSE, expires_in=timedelta(minutes=10)):
    entry = OTPEntry(
        contact=contact,
        code=code,
        channel=OTPChannel.EMAIL,
        purpose=purpose,
        expires_at=datetime.now(timezone.utc) + expires_in,
        is_used=False,
        failed_attempts=0,
    )
    db.add(entry)
    db.commit()
    return entry


class TestHelpers:
    """Pure helpers"""

    def test_generate_otp_is_six_digits(self):
        for _ in range(200):
            code = generate_otp()
            assert len(code) == 6
            assert 100000 <= int(code) <= 999999

    def test_normalize_email_lowercases(self):
        assert normalize_contact('  A@B.Com ', OTPChannel.EMAIL) == 'a@b.com'

    def test_normalize_phone_strips_separators(self):
        assert normalize_contact('+880 171-234 5678', OTPChannel.PHONE) == '+8801712345678'

    def test_mask_phone(self):
        assert mask_phone('+8801712345678') == '+880****5678'

    def test_mask_email(self):
        assert mask_email('Jane.Doe@Example.com') == 'ja****@example.com'


class TestIssue:
    """Issuing codes"""

    def test_issue_persists_and_emails(self, db_session, outbox):
        issue = issue_otp(db_session, 'A@B.com', OTPChannel.EMAIL, PURPOSE)

        entry = db_session.query(OTPEntry).one()
        assert entry.contact == EMAIL
        assert entry.purpose == PURPOSE
        assert entry.is_used is False
        assert issue.delivered is True
        assert issue.expires_in_minutes == settings.OTP_EXPIRE_MINUTES
        assert len(outbox) == 1
        assert entry.code in outbox[0]['plain']

    def test_issue_does_not_invalidate_earlier_codes(self, db_session):
        issue_otp(db_session, EMAIL, OTPChannel.EMAIL, PURPOSE)
        first = db_session.query(OTPEntry).order_by(OTPEntry.id).first().code
        issue_otp(db_session, EMAIL, OTPChannel.EMAIL, PURPOSE)

        assert verify_otp(db_session, EMAIL, first, OTPChannel.EMAIL, PURPOSE) is True

    def test_unconfigured_smtp_is_503(self, db_session, monkeypatch):
        def unconfigured(*args, **kwargs):
            raise EmailConfigurationError(['SMTP_HOST'])

        monkeypatch.setattr(otp_service, 'send_otp_email', unconfigured)

        with pytest.raises(DeliveryUnavailableException) as exc:
            issue_otp(db_session, EMAIL, OTPChannel.EMAIL, PURPOSE)
        assert exc.value.status_code == 503
        # stored before dispatch
        assert db_session.query(OTPEntry).count() == 1

    def test_send_email_checks_configuration_first(self, monkeypatch):
        monkeypatch.setattr(settings, 'SMTP_HOST', '')

        with pytest.raises(EmailConfigurationError) as exc:
            real_send_email(EMAIL, 'subject', '<p>body</p>')
        assert 'SMTP_HOST' in exc.value.missing

    def test_failed_send_is_503(self, db_session, monkeypatch):
        monkeypatch.setattr(otp_service, 'send_otp_email', lambda *args, **kwargs: False)

        with pytest.raises(DeliveryUnavailableException):
            issue_otp(db_session, EMAIL, OTPChannel.EMAIL, PURPOSE)

    def test_phone_without_sms_provider_is_503(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, 'SMS_LOG_ONLY', False)

        with pytest.raises(DeliveryUnavailableException):
            issue_otp(db_session, '+8801712345678', OTPChannel.PHONE, PURPOSE)

    def test_phone_log_only_reports_not_delivered(self, db_session):
        issue = issue_otp(db_session, '+8801712345678', OTPChannel.PHONE, PURPOSE)
        assert issue.delivered is False


class TestVerify:
    """Verifying codes"""

    def test_correct_code_verifies_once(self, db_session):
        _store(db_session, code='654321')

        assert verify_otp(db_session, EMAIL, '654321', OTPChannel.EMAIL, PURPOSE) is True
        assert verify_otp(db_session, EMAIL, '654321', OTPChannel.EMAIL, PURPOSE) is False

        entry = db_session.query(OTPEntry).one()
        assert entry.is_used is True
        assert entry.used_at is not None

    def test_expired_code_never_verifies(self, db_session):
        _store(db_session, code='111222', expires_in=timedelta(minutes=-1))

        assert verify_otp(db_session, EMAIL, '111222', OTPChannel.EMAIL, PURPOSE) is False
        assert db_session.query(OTPEntry).one().is_used is False

    def test_wrong_code_fails_and_counts(self, db_session):
        _store(db_session, code='111222')

        assert verify_otp(db_session, EMAIL, '999999', OTPChannel.EMAIL, PURPOSE) is False
        assert db_session.query(OTPEntry).one().failed_attempts == 1

    def test_never_issued_fails(self, db_session):
        assert verify_otp(db_session, 'nobody@b.com', '123456', OTPChannel.EMAIL, PURPOSE) is False

    def test_purpose_is_part_of_the_match(self, db_session):
        _store(db_session, code='333444', purpose=OTPPurpose.MEMBER_REGISTRATION)

        assert verify_otp(db_session, EMAIL, '333444', OTPChannel.EMAIL, PURPOSE) is False
        assert verify_otp(db_session, EMAIL, '333444', OTPChannel.EMAIL, OTPPurpose.MEMBER_REGISTRATION) is True

    def test_contact_comparison_is_case_insensitive(self, db_session):
        _store(db_session, code='555666')
        assert verify_otp(db_session, 'A@B.COM', '555666', OTPChannel.EMAIL, PURPOSE) is True

    def test_lockout_after_max_attempts(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, 'OTP_MAX_ATTEMPTS', 3)
        _store(db_session, code='777888')

        for _ in range(3):
            assert verify_otp(db_session, EMAIL, '000000', OTPChannel.EMAIL, PURPOSE) is False

        with pytest.raises(TooManyAttemptsException):
            verify_otp(db_session, EMAIL, '777888', OTPChannel.EMAIL, PURPOSE)

    def test_new_code_lifts_lockout(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, 'OTP_MAX_ATTEMPTS', 2)
        _store(db_session, code='777888')
        for _ in range(2):
            verify_otp(db_session, EMAIL, '000000', OTPChannel.EMAIL, PURPOSE)

        _store(db_session, code='121212')
        assert verify_otp(db_session, EMAIL, '121212', OTPChannel.EMAIL, PURPOSE) is True

    def test_locked_code_stays_dead_after_new_code(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, 'OTP_MAX_ATTEMPTS', 2)
        _store(db_session, code='777888')
        for _ in range(2):
            verify_otp(db_session, EMAIL, '000000', OTPChannel.EMAIL, PURPOSE)

        _store(db_session, code='121212')

        assert verify_otp(db_session, EMAIL, '777888', OTPChannel.EMAIL, PURPOSE) is False
        assert verify_otp(db_session, EMAIL, '121212', OTPChannel.EMAIL, PURPOSE) is True
