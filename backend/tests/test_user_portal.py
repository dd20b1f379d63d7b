from fastapi.testclient import TestClient

from readingclub.main import app

client = TestClient(app)


def _user_headers(name, password):
    r = client.post('/api/user/login', json={'name': name, 'password': password})
    assert r.status_code == 200
    return {'Authorization': f"Bearer {r.json()['token']}"}


def _participate(world, person_key, day, group_id=None):
    return client.post('/api/admin/participations', headers=world['headers'], params={
        'semesterId': world['semester_id'], 'groupId': group_id or world['group_id'], 'personId': world[person_key],
    }, json={'status': 'ontime', 'participationDate': day}).json()['id']


def test_semester_summary_lists_each_group_once(world):
    h = world['headers']
    other = client.post('/api/admin/groups', headers=h, json={'groupName': 'Thursday Readers'}).json()['id']
    _participate(world, 'alice_id', '2026-03-03')
    _participate(world, 'alice_id', '2026-03-10')
    _participate(world, 'alice_id', '2026-03-12', group_id=other)

    alice = _user_headers('Alice', 'alicepw')
    r = client.get(f"/api/user/{world['alice_id']}/semesters", headers=alice)
    assert r.status_code == 200
    body = r.json()
    assert body['personName'] == 'Alice'
    assert len(body['semesters']) == 1
    semester = body['semesters'][0]
    assert semester['semesterName'] == 'Spring 2026'
    assert [g['groupName'] for g in semester['groups']] == ['Tuesday Readers', 'Thursday Readers']
    assert semester['groups'][0]['participationDate'] == '2026-03-03'


def test_other_persons_data_is_forbidden(world):
    alice = _user_headers('Alice', 'alicepw')
    r = client.get(f"/api/user/{world['bob_id']}/participations", headers=alice)
    assert r.status_code == 403
    # admins may look at anyone
    assert client.get(f"/api/user/{world['bob_id']}/participations", headers=world['headers']).status_code == 200


def test_unknown_person_summary_is_404(world):
    assert client.get('/api/user/9999/semesters', headers=world['headers']).status_code == 404


def test_record_upsert_creates_then_updates(world):
    pid = _participate(world, 'alice_id', '2026-03-03')
    alice = _user_headers('Alice', 'alicepw')
    url = f'/api/user/participations/{pid}/record'

    created = client.put(url, headers=alice, json={
        'weekNumber': 1, 'service1': 'ontime', 'service2': 'absent',
        'qt': 5, 'reading': 20, 'pray': 6, 'memorize': 2, 'submittedDate': '2026-03-08',
    })
    assert created.status_code == 200
    rid = created.json()['id']

    updated = client.put(url, headers=alice, json={'reading': 30})
    assert updated.status_code == 200
    assert updated.json()['id'] == rid
    assert updated.json()['reading'] == 30
    assert updated.json()['qt'] == 5

    assert client.put(url, headers=alice, json={'memorize': 9}).status_code == 400

    items = client.get(f"/api/user/{world['alice_id']}/participations", headers=alice).json()
    assert len(items) == 1
    assert items[0]['weeklyRecord']['recordId'] == rid
    assert items[0]['weeklyRecord']['reading'] == 30
    assert items[0]['weeklyRecord']['submittedDate'] == '2026-03-08'


def test_record_upsert_for_someone_else_is_forbidden(world):
    pid = _participate(world, 'bob_id', '2026-03-03')
    alice = _user_headers('Alice', 'alicepw')
    r = client.put(f'/api/user/participations/{pid}/record', headers=alice, json={'qt': 1})
    assert r.status_code == 403
    assert client.put('/api/user/participations/9999/record', headers=alice, json={'qt': 1}).status_code == 404


def test_participations_filtered_by_group(world):
    h = world['headers']
    other = client.post('/api/admin/groups', headers=h, json={'groupName': 'Thursday Readers'}).json()['id']
    _participate(world, 'alice_id', '2026-03-03')
    keep = _participate(world, 'alice_id', '2026-03-05', group_id=other)
    alice = _user_headers('Alice', 'alicepw')
    items = client.get(f"/api/user/{world['alice_id']}/participations", headers=alice,
                       params={'semesterId': world['semester_id'], 'groupId': other}).json()
    assert [i['participationId'] for i in items] == [keep]
    assert 'weeklyRecord' not in items[0]
