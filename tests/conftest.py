"""
MemberHub - Test Configuration and Fixtures
"""
import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the application reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only-0123456789'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['SMTP_HOST'] = 'smtp.test.local'
os.environ['SMTP_USER'] = 'mailer@test.local'
os.environ['SMTP_PASSWORD'] = 'test-smtp-password'
os.environ['SMS_LOG_ONLY'] = 'true'
os.environ['LOG_LEVEL'] = 'WARNING'

from memberhub.main import app
from memberhub.core.dependencies import get_db
from memberhub.db.base import Base
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.models.organization import Organization
from memberhub.models.otp import OTPEntry
from memberhub.services.auth_service import create_admin_token, get_password_hash
from memberhub.utils import email as email_utils

fake = Faker()

SUPER_ADMIN_PASSWORD = 'SuperPass123'
ADMIN_PASSWORD = 'AdminPass123'

test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """Capture outgoing email instead of talking to SMTP"""
    sent = []

    def fake_send_email(to, subject, html_body, plain_body=""):
        sent.append({'to': to, 'subject': subject, 'html': html_body, 'plain': plain_body})
        return True

    monkeypatch.setattr(email_utils, 'send_email', fake_send_email)
    return sent


@pytest.fixture
def organization(db_session: Session) -> Organization:
    org = Organization(name='Dhaka Engineers Association', description=fake.sentence(), is_active=True)
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def super_admin(db_session: Session) -> Admin:
    admin = Admin(
        username='superadmin',
        email='superadmin@test.local',
        password_hash=get_password_hash(SUPER_ADMIN_PASSWORD),
        first_name='Super',
        last_name='Admin',
        role=AdminRole.SUPER_ADMIN,
        status=AdminStatus.APPROVED,
        is_active=True,
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def org_admin(db_session: Session, organization: Organization) -> Admin:
    admin = Admin(
        username=fake.user_name()[:20] + '1',
        email=fake.unique.email(),
        password_hash=get_password_hash(ADMIN_PASSWORD),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        role=AdminRole.ADMIN,
        organization_id=organization.id,
        status=AdminStatus.APPROVED,
        is_active=True,
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def super_admin_headers(super_admin: Admin) -> dict:
    return {'Authorization': f'Bearer {create_admin_token(super_admin)}'}


@pytest.fixture
def admin_headers(org_admin: Admin) -> dict:
    return {'Authorization': f'Bearer {create_admin_token(org_admin)}'}


def latest_code(db: Session, contact: str) -> str:
    """The most recently issued code for *contact*"""
    entry = (
        db.query(OTPEntry)
        .filter(OTPEntry.contact == contact)
        .order_by(OTPEntry.id.desc())
        .first()
    )
    assert entry is not None, f'no code issued to {contact}'
    return entry.code


@pytest.fixture
def otp_code(db_session: Session):
    return lambda contact: latest_code(db_session, contact)
