from fastapi.testclient import TestClient

from readingclub.main import app

client = TestClient(app)


def _create(headers, **overrides):
    payload = {'username': 'editor', 'name': 'Editor', 'password': 'editorpass', 'type': 'admin'}
    payload.update(overrides)
    return client.post('/api/admin/admins', headers=headers, json=payload)


def test_create_admin_validation(admin_headers):
    assert _create(admin_headers, username='ab').status_code == 400
    assert _create(admin_headers, name='E').status_code == 400
    assert _create(admin_headers, password='short').status_code == 400
    r = _create(admin_headers, type='owner')
    assert r.status_code == 400
    assert 'Invalid admin type' in r.json()['error']


def test_admin_type_is_case_insensitive_and_stored_lower(admin_headers):
    r = _create(admin_headers, type='Moderator')
    assert r.status_code == 201
    body = r.json()
    assert body['type'] == 'moderator'
    assert body['isDeleted'] is False
    assert 'password' not in body and 'passwordHash' not in body


def test_duplicate_username_rejected(admin_headers):
    assert _create(admin_headers).status_code == 201
    r = _create(admin_headers)
    assert r.status_code == 400
    assert r.json()['error'] == 'Username already exists'


def test_partial_update_keeps_other_fields(admin_headers):
    admin_id = _create(admin_headers).json()['id']
    r = client.put(f'/api/admin/admins/{admin_id}', headers=admin_headers, json={'name': 'Chief Editor'})
    assert r.status_code == 200
    assert r.json()['name'] == 'Chief Editor'
    assert r.json()['username'] == 'editor'
    # password was untouched
    assert client.post('/api/auth/login', json={'username': 'editor', 'password': 'editorpass'}).status_code == 200
    assert client.put(f'/api/admin/admins/{admin_id}', headers=admin_headers,
                      json={'password': 'short'}).status_code == 400


def test_soft_delete_and_restore(admin_headers):
    admin_id = _create(admin_headers).json()['id']
    assert client.delete(f'/api/admin/admins/{admin_id}', headers=admin_headers).json() == {
        'success': True, 'message': 'Admin deleted successfully',
    }
    active = [a['id'] for a in client.get('/api/admin/admins', headers=admin_headers).json()]
    deleted = [a['id'] for a in client.get('/api/admin/admins/deleted', headers=admin_headers).json()]
    assert admin_id not in active
    assert admin_id in deleted

    again = client.delete(f'/api/admin/admins/{admin_id}', headers=admin_headers)
    assert again.status_code == 400

    restored = client.put(f'/api/admin/admins/{admin_id}/restore', headers=admin_headers)
    assert restored.status_code == 200
    assert restored.json()['isDeleted'] is False
    assert client.put(f'/api/admin/admins/{admin_id}/restore', headers=admin_headers).status_code == 400


def test_last_superadmin_cannot_be_deleted(admin_headers):
    me = client.get('/api/admin/admins', headers=admin_headers).json()[0]
    r = client.delete(f"/api/admin/admins/{me['id']}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()['error'] == 'Cannot delete last active superadmin'

    second = _create(admin_headers, username='backup', type='superadmin')
    assert second.status_code == 201
    assert client.delete(f"/api/admin/admins/{second.json()['id']}", headers=admin_headers).status_code == 200


def test_unknown_admin_is_404(admin_headers):
    r = client.get('/api/admin/admins/9999', headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {'success': False, 'error': 'Admin not found with id: 9999'}


def test_last_superadmin_cannot_be_demoted(admin_headers):
    me = client.get('/api/admin/admins', headers=admin_headers).json()[0]
    r = client.put(f"/api/admin/admins/{me['id']}", headers=admin_headers, json={'type': 'viewer'})
    assert r.status_code == 400
    assert r.json()['error'] == 'Cannot demote last active superadmin'
    assert client.get(f"/api/admin/admins/{me['id']}", headers=admin_headers).json()['type'] == 'superadmin'

    # re-saving the same type is not a demotion
    assert client.put(f"/api/admin/admins/{me['id']}", headers=admin_headers,
                      json={'type': 'SuperAdmin'}).status_code == 200

    assert _create(admin_headers, username='backup', type='superadmin').status_code == 201
    r = client.put(f"/api/admin/admins/{me['id']}", headers=admin_headers, json={'type': 'admin'})
    assert r.status_code == 200
    assert r.json()['type'] == 'admin'
