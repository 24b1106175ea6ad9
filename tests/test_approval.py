"""
Tests for superadmin review of admin applications
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from memberhub.db.base import Base
from memberhub.errors.exceptions import AlreadyProcessedException
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.models.admin_request import AdminRequest, RequestStatus
from memberhub.models.organization import Organization
from memberhub.services.approval_service import approve_admin_request
from memberhub.services.auth_service import get_password_hash, verify_password


def pending_request(db, organization, username='nawab1996', email='nawab@example.com', password='Secret1!'):
    request = AdminRequest(
        email=email,
        first_name='Nawab',
        last_name='Ali',
        phone='+8801712345678',
        organization_id=organization.id,
        username=username,
        password_hash=get_password_hash(password),
        level='district',
        experience='District roads office since 2015',
        verification_type='email',
        verified_contact=email,
        status=RequestStatus.PENDING,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


def approve_url(request_id):
    return f'/api/v1/superadmin/admin-approve/{request_id}'


class TestApprove:
    """POST /superadmin/admin-approve/{id}"""

    def test_credentials_are_preserved(self, client, db_session, organization, super_admin_headers):
        request = pending_request(db_session, organization)
        original_hash = request.password_hash

        response = client.post(approve_url(request.id), headers=super_admin_headers)

        assert response.status_code == 200, response.json()
        data = response.json()
        assert data['admin']['username'] == 'nawab1996'
        assert data['admin']['organizationName'] == organization.name
        assert data['loginCredentials'] == {
            'username': 'nawab1996',
            'credentialsSource': 'original',
            'note': data['loginCredentials']['note'],
        }

        admin = db_session.query(Admin).filter(Admin.username == 'nawab1996').one()
        assert admin.password_hash == original_hash
        assert admin.role == AdminRole.ADMIN
        assert admin.status == AdminStatus.APPROVED
        assert admin.is_active is True
        assert admin.organization_id == organization.id
        assert admin.admin_request_id == request.id
        assert admin.experience == 'District roads office since 2015'

        db_session.refresh(request)
        assert request.status == RequestStatus.APPROVED
        assert request.reviewed_at is not None

    def test_approved_admin_can_log_in_with_original_password(self, client, db_session, organization,
                                                              super_admin_headers):
        request = pending_request(db_session, organization)
        client.post(approve_url(request.id), headers=super_admin_headers)

        response = client.post('/api/v1/auth/admin/login', json={'username': 'nawab1996', 'password': 'Secret1!'})

        assert response.status_code == 200
        assert response.json()['admin']['username'] == 'nawab1996'

    def test_approval_sends_email(self, client, db_session, organization, super_admin_headers, outbox):
        request = pending_request(db_session, organization)
        client.post(approve_url(request.id), headers=super_admin_headers)

        assert outbox[-1]['to'] == request.email
        assert 'nawab1996' in outbox[-1]['plain']

    def test_email_failure_does_not_undo_approval(self, client, db_session, organization,
                                                  super_admin_headers, monkeypatch):
        from memberhub.services import approval_service
        monkeypatch.setattr(approval_service, 'send_admin_approved_email', lambda *args: False)
        request = pending_request(db_session, organization)

        response = client.post(approve_url(request.id), headers=super_admin_headers)

        assert response.status_code == 200
        assert db_session.query(Admin).filter(Admin.username == 'nawab1996').count() == 1

    def test_second_approval_is_already_processed(self, client, db_session, organization, super_admin_headers):
        request = pending_request(db_session, organization)

        first = client.post(approve_url(request.id), headers=super_admin_headers)
        second = client.post(approve_url(request.id), headers=super_admin_headers)

        assert first.status_code == 200
        assert second.status_code == 409
        assert db_session.query(Admin).filter(Admin.admin_request_id == request.id).count() == 1

    def test_rejected_request_cannot_be_approved(self, client, db_session, organization, super_admin_headers):
        request = pending_request(db_session, organization)
        client.post(f'/api/v1/superadmin/admin-reject/{request.id}', headers=super_admin_headers)

        response = client.post(approve_url(request.id), headers=super_admin_headers)

        assert response.status_code == 409
        assert db_session.query(Admin).filter(Admin.username == 'nawab1996').count() == 0

    def test_unknown_request(self, client, super_admin_headers):
        response = client.post(approve_url(9999), headers=super_admin_headers)
        assert response.status_code == 404

    def test_failed_insert_leaves_request_pending(self, client, db_session, organization, super_admin,
                                                  super_admin_headers):
        # A live admin already owns the username, so the insert violates a unique constraint
        db_session.add(Admin(
            username='nawab1996',
            email='someone@example.com',
            password_hash=get_password_hash('Other1234'),
            role=AdminRole.ADMIN,
            status=AdminStatus.APPROVED,
            is_active=True,
        ))
        db_session.commit()
        request = pending_request(db_session, organization)

        response = client.post(approve_url(request.id), headers=super_admin_headers)

        assert response.status_code == 409
        db_session.expire_all()
        assert db_session.get(AdminRequest, request.id).status == RequestStatus.PENDING
        assert db_session.query(Admin).filter(Admin.admin_request_id == request.id).count() == 0

    def test_requires_super_admin(self, client, db_session, organization, admin_headers):
        request = pending_request(db_session, organization)

        response = client.post(approve_url(request.id), headers=admin_headers)

        assert response.status_code == 403
        db_session.refresh(request)
        assert request.status == RequestStatus.PENDING

    def test_requires_authentication(self, client, db_session, organization):
        request = pending_request(db_session, organization)
        assert client.post(approve_url(request.id)).status_code == 401


class TestReject:
    """POST /superadmin/admin-reject/{id}"""

    def test_reject_with_reason(self, client, db_session, organization, super_admin_headers, outbox):
        request = pending_request(db_session, organization)

        response = client.post(
            f'/api/v1/superadmin/admin-reject/{request.id}',
            json={'reason': 'Incomplete experience record'},
            headers=super_admin_headers,
        )

        assert response.status_code == 200
        data = response.json()['request']
        assert data['status'] == 'rejected'
        assert data['reviewNote'] == 'Incomplete experience record'
        assert data['organizationName'] == organization.name
        assert 'passwordHash' not in data
        assert outbox[-1]['to'] == request.email

    def test_reject_without_body(self, client, db_session, organization, super_admin_headers):
        request = pending_request(db_session, organization)
        response = client.post(f'/api/v1/superadmin/admin-reject/{request.id}', headers=super_admin_headers)
        assert response.status_code == 200

    def test_reject_twice(self, client, db_session, organization, super_admin_headers):
        request = pending_request(db_session, organization)
        url = f'/api/v1/superadmin/admin-reject/{request.id}'

        assert client.post(url, headers=super_admin_headers).status_code == 200
        assert client.post(url, headers=super_admin_headers).status_code == 409


class TestListings:
    """GET /superadmin/admin-requests and /superadmin/admins"""

    def test_list_requests_filtered_by_status(self, client, db_session, organization, super_admin_headers):
        first = pending_request(db_session, organization)
        pending_request(db_session, organization, username='second2', email='second@example.com')
        client.post(approve_url(first.id), headers=super_admin_headers)

        response = client.get('/api/v1/superadmin/admin-requests?status=pending', headers=super_admin_headers)

        assert response.status_code == 200
        usernames = [item['username'] for item in response.json()]
        assert usernames == ['second2']
        assert response.json()[0]['organizationName'] == organization.name

    def test_list_admins(self, client, super_admin, org_admin, super_admin_headers):
        response = client.get('/api/v1/superadmin/admins', headers=super_admin_headers)

        assert response.status_code == 200
        assert {item['username'] for item in response.json()} == {super_admin.username, org_admin.username}


class TestEndToEnd:
    """send-otp → verify-otp → complete-registration → approve → login"""

    def test_full_pipeline(self, client, db_session, organization, super_admin_headers, otp_code):
        url = '/api/v1/admin-registration'
        client.post(url, json={'step': 'send-otp', 'verificationType': 'email', 'email': 'a@b.com'})
        verified = client.post(url, json={
            'step': 'verify-otp', 'verificationType': 'email', 'email': 'a@b.com', 'otp': otp_code('a@b.com'),
        })
        assert verified.json()['success'] is True

        completed = client.post(url, json={
            'step': 'complete-registration',
            'organization': organization.id,
            'firstName': 'Bob',
            'lastName': 'Builder',
            'email': 'a@b.com',
            'phone': '+8801712345678',
            'username': 'bob1',
            'password': 'Secret1!',
            'verificationType': 'email',
            'verifiedContact': 'a@b.com',
            'hasOTP': True,
            'verificationToken': verified.json()['verificationToken'],
        })
        assert completed.status_code == 201
        assert completed.json()['username'] == 'bob1'

        approved = client.post(approve_url(completed.json()['requestId']), headers=super_admin_headers)
        assert approved.status_code == 200
        assert approved.json()['admin']['username'] == 'bob1'

        admin = db_session.query(Admin).filter(Admin.username == 'bob1').one()
        assert verify_password('Secret1!', admin.password_hash)


class TestConcurrentApproval:
    """Two reviewers acting on the same pending request"""

    def test_both_load_pending_then_approve(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'review.db'}", connect_args={'check_same_thread': False})
        Base.metadata.create_all(bind=engine)
        Sessions = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        setup = Sessions()
        organization = Organization(name='Khulna Guild', is_active=True)
        reviewer = Admin(
            username='chief',
            email='chief@example.com',
            password_hash=get_password_hash('ChiefPass123'),
            role=AdminRole.SUPER_ADMIN,
            status=AdminStatus.APPROVED,
            is_active=True,
        )
        setup.add_all([organization, reviewer])
        setup.commit()
        request_id = pending_request(setup, organization).id
        reviewer_id = reviewer.id

        first, second = Sessions(), Sessions()
        try:
            first_reviewer = first.get(Admin, reviewer_id)
            second_reviewer = second.get(Admin, reviewer_id)
            assert first.get(AdminRequest, request_id).status == RequestStatus.PENDING
            assert second.get(AdminRequest, request_id).status == RequestStatus.PENDING

            admin, _ = approve_admin_request(first, request_id, first_reviewer)
            with pytest.raises(AlreadyProcessedException) as exc_info:
                approve_admin_request(second, request_id, second_reviewer)
            assert exc_info.value.status_code == 409

            setup.expire_all()
            assert setup.query(Admin).filter(Admin.admin_request_id == request_id).count() == 1
            assert setup.get(AdminRequest, request_id).status == RequestStatus.APPROVED
            assert admin.username == 'nawab1996'
        finally:
            for session in (first, second, setup):
                session.close()
            engine.dispose()
