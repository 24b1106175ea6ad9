"""
Tests for organization endpoints
"""
from memberhub.models.organization import Organization


class TestPublicListing:
    """GET /organizations"""

    def test_lists_active_by_name(self, client, db_session):
        db_session.add_all([
            Organization(name='Zeta Union', is_active=True),
            Organization(name='Alpha Society', is_active=True),
            Organization(name='Closed Club', is_active=False),
        ])
        db_session.commit()

        response = client.get('/api/v1/organizations')

        assert response.status_code == 200
        assert [org['name'] for org in response.json()] == ['Alpha Society', 'Zeta Union']


class TestSuperAdminManagement:
    """/superadmin/organizations"""

    def test_create(self, client, super_admin_headers):
        response = client.post('/api/v1/superadmin/organizations', headers=super_admin_headers, json={
            'name': 'Rajshahi Guild', 'contactEmail': 'info@rajshahi.example.com',
        })

        assert response.status_code == 201
        assert response.json()['name'] == 'Rajshahi Guild'
        assert response.json()['isActive'] is True

    def test_duplicate_name(self, client, organization, super_admin_headers):
        response = client.post('/api/v1/superadmin/organizations', headers=super_admin_headers, json={
            'name': organization.name.upper(),
        })
        assert response.status_code == 409

    def test_update(self, client, organization, super_admin_headers):
        response = client.put(
            f'/api/v1/superadmin/organizations/{organization.id}',
            headers=super_admin_headers,
            json={'description': 'Updated'},
        )

        assert response.status_code == 200
        assert response.json()['description'] == 'Updated'
        assert response.json()['name'] == organization.name

    def test_deactivate_hides_from_listing(self, client, organization, super_admin_headers):
        response = client.delete(f'/api/v1/superadmin/organizations/{organization.id}', headers=super_admin_headers)

        assert response.status_code == 200
        assert response.json()['isActive'] is False
        assert client.get('/api/v1/organizations').json() == []

    def test_update_unknown(self, client, super_admin_headers):
        response = client.put('/api/v1/superadmin/organizations/999', headers=super_admin_headers, json={})
        assert response.status_code == 404

    def test_admin_cannot_create(self, client, admin_headers):
        response = client.post('/api/v1/superadmin/organizations', headers=admin_headers, json={'name': 'Nope'})
        assert response.status_code == 403
