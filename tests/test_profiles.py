"""
Tests for profile updates and the organization roster
"""
from memberhub.models.member import Member, MemberStatus
from memberhub.models.organization import Organization
from memberhub.services.auth_service import (
    ACCESS_FULL,
    ACCESS_LIMITED,
    create_member_token,
    get_password_hash,
    verify_password,
)

ADMIN_PASSWORD = 'AdminPass123'


def add_member(db, organization, suffix, status=MemberStatus.APPROVED, first_name='Jane', last_name='Doe'):
    member = Member(
        membership_id=f'DEA26JADO00000{suffix}',
        organization_id=organization.id,
        first_name=first_name,
        last_name=last_name,
        email=f'member{suffix}@example.com',
        phone=f'+88017000000{suffix}',
        address='12 Lake Road, Dhaka',
        password_hash=get_password_hash('MemberPass1'),
        status=status,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def member_headers(member) -> dict:
    access = ACCESS_FULL if member.has_full_access else ACCESS_LIMITED
    return {'Authorization': f'Bearer {create_member_token(member, access)}'}


class TestAdminProfile:
    """PUT /auth/me and POST /auth/change-password"""

    def test_update_allowed_fields(self, client, db_session, org_admin, admin_headers):
        response = client.put('/api/v1/auth/me', headers=admin_headers, json={
            'firstName': '  Rahim ', 'phone': '+8801911111111', 'experience': 'Ten years in civil works',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['firstName'] == 'Rahim'
        assert data['phone'] == '+8801911111111'
        assert data['experience'] == 'Ten years in civil works'
        db_session.refresh(org_admin)
        assert org_admin.first_name == 'Rahim'

    def test_omitted_fields_are_unchanged_and_blank_clears(self, client, db_session, org_admin, admin_headers):
        last_name = org_admin.last_name

        response = client.put('/api/v1/auth/me', headers=admin_headers, json={'phone': '   '})

        assert response.status_code == 200
        assert response.json()['phone'] is None
        assert response.json()['lastName'] == last_name

    def test_username_and_role_cannot_be_changed(self, client, db_session, org_admin, admin_headers):
        username = org_admin.username

        response = client.put('/api/v1/auth/me', headers=admin_headers, json={
            'username': 'hijack', 'role': 'super_admin',
        })

        assert response.status_code == 400
        db_session.refresh(org_admin)
        assert org_admin.username == username
        assert org_admin.is_super_admin is False

    def test_super_admin_updates_own_profile(self, client, super_admin_headers):
        response = client.put('/api/v1/auth/me', headers=super_admin_headers, json={'lastName': 'Root'})

        assert response.status_code == 200
        assert response.json()['lastName'] == 'Root'
        assert response.json()['role'] == 'super_admin'

    def test_requires_authentication(self, client):
        assert client.put('/api/v1/auth/me', json={'firstName': 'X'}).status_code == 401

    def test_change_password(self, client, db_session, org_admin, admin_headers):
        wrong = client.post('/api/v1/auth/change-password', headers=admin_headers, json={
            'currentPassword': 'nope', 'newPassword': 'BetterPass123',
        })
        assert wrong.status_code == 400

        changed = client.post('/api/v1/auth/change-password', headers=admin_headers, json={
            'currentPassword': ADMIN_PASSWORD, 'newPassword': 'BetterPass123',
        })
        assert changed.status_code == 200

        db_session.refresh(org_admin)
        assert verify_password('BetterPass123', org_admin.password_hash)


class TestMemberProfile:
    """PUT /members/me"""

    def test_update_allowed_fields(self, client, db_session, organization):
        member = add_member(db_session, organization, 1, status=MemberStatus.PENDING)

        response = client.put('/api/v1/members/me', headers=member_headers(member), json={
            'phone': '+880 1555-123 456',
            'designation': 'Senior Engineer',
            'achievements': 'Bridge design award',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['phone'] == '+8801555123456'
        assert data['designation'] == 'Senior Engineer'
        assert data['achievements'] == 'Bridge design award'
        assert data['address'] == '12 Lake Road, Dhaka'

    def test_admin_controlled_fields_are_ignored(self, client, db_session, organization):
        member = add_member(db_session, organization, 1, status=MemberStatus.PENDING)

        response = client.put('/api/v1/members/me', headers=member_headers(member), json={
            'status': 'approved', 'email': 'new@example.com', 'firstName': 'Other',
        })

        assert response.status_code == 400
        db_session.refresh(member)
        assert member.status == MemberStatus.PENDING
        assert member.email == 'member1@example.com'

    def test_address_cannot_be_cleared(self, client, db_session, organization):
        member = add_member(db_session, organization, 1)

        response = client.put('/api/v1/members/me', headers=member_headers(member), json={'address': ''})

        assert response.status_code == 400
        db_session.refresh(member)
        assert member.address == '12 Lake Road, Dhaka'

    def test_phone_of_another_member(self, client, db_session, organization):
        member = add_member(db_session, organization, 1)
        other = add_member(db_session, organization, 2)

        response = client.put('/api/v1/members/me', headers=member_headers(member), json={'phone': other.phone})

        assert response.status_code == 409

    def test_admin_token_is_refused(self, client, admin_headers):
        response = client.put('/api/v1/members/me', headers=admin_headers, json={'address': 'Elsewhere'})
        assert response.status_code == 401


class TestOrganizationRoster:
    """GET /organizations/{id}/members"""

    def _url(self, organization):
        return f'/api/v1/organizations/{organization.id}/members'

    def test_lists_approved_and_active_by_name(self, client, db_session, organization, admin_headers):
        add_member(db_session, organization, 1, last_name='Zaman')
        add_member(db_session, organization, 2, status=MemberStatus.ACTIVE, last_name='Ahmed')
        add_member(db_session, organization, 3, status=MemberStatus.PENDING, last_name='Karim')
        add_member(db_session, organization, 4, status=MemberStatus.REJECTED, last_name='Hasan')

        response = client.get(self._url(organization), headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['organizationName'] == organization.name
        assert [entry['lastName'] for entry in data['members']] == ['Ahmed', 'Zaman']
        assert 'email' not in data['members'][0]
        assert 'phone' not in data['members'][0]

    def test_approved_member_sees_own_organization(self, client, db_session, organization):
        viewer = add_member(db_session, organization, 1)

        response = client.get(self._url(organization), headers=member_headers(viewer))

        assert response.status_code == 200
        assert [entry['membershipId'] for entry in response.json()['members']] == [viewer.membership_id]

    def test_pending_member_is_refused(self, client, db_session, organization):
        viewer = add_member(db_session, organization, 1, status=MemberStatus.PENDING)

        response = client.get(self._url(organization), headers=member_headers(viewer))

        assert response.status_code == 403

    def test_other_organization_is_refused(self, client, db_session, organization, admin_headers):
        other = Organization(name='Sylhet Chamber', is_active=True)
        db_session.add(other)
        db_session.commit()
        viewer = add_member(db_session, other, 1)

        assert client.get(self._url(organization), headers=admin_headers).status_code == 200
        assert client.get(self._url(other), headers=admin_headers).status_code == 403
        assert client.get(self._url(organization), headers=member_headers(viewer)).status_code == 403

    def test_super_admin_sees_any(self, client, db_session, organization, super_admin_headers):
        add_member(db_session, organization, 1)

        response = client.get(self._url(organization), headers=super_admin_headers)

        assert response.status_code == 200
        assert len(response.json()['members']) == 1

    def test_unknown_organization(self, client, super_admin_headers):
        response = client.get('/api/v1/organizations/999/members', headers=super_admin_headers)
        assert response.status_code == 404

    def test_requires_authentication(self, client, organization):
        assert client.get(self._url(organization)).status_code == 401
