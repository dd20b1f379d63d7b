from fastapi.testclient import TestClient

from readingclub.main import app

client = TestClient(app)


def test_semester_end_before_start_rejected(admin_headers):
    r = client.post('/api/admin/semesters', headers=admin_headers, json={
        'name': 'Backwards', 'startDate': '2026-06-30', 'endDate': '2026-03-01',
    })
    assert r.status_code == 400
    assert r.json()['error'] == 'End date must be after start date'


def test_semester_single_day_allowed(admin_headers):
    r = client.post('/api/admin/semesters', headers=admin_headers, json={
        'name': 'Retreat', 'startDate': '2026-05-01', 'endDate': '2026-05-01', 'isBreak': True,
    })
    assert r.status_code == 201
    assert r.json()['isBreak'] is True


def test_semester_update_checks_merged_dates(admin_headers):
    sid = client.post('/api/admin/semesters', headers=admin_headers, json={
        'name': 'Spring', 'startDate': '2026-03-01', 'endDate': '2026-06-30',
    }).json()['id']
    r = client.put(f'/api/admin/semesters/{sid}', headers=admin_headers, json={'startDate': '2026-07-01'})
    assert r.status_code == 400
    r2 = client.put(f'/api/admin/semesters/{sid}', headers=admin_headers, json={'endDate': '2026-07-15'})
    assert r2.status_code == 200
    assert r2.json()['endDate'] == '2026-07-15'
    assert r2.json()['name'] == 'Spring'


def test_group_membership_is_a_set(world):
    h, gid, alice = world['headers'], world['group_id'], world['alice_id']
    first = client.post(f'/api/admin/groups/{gid}/persons', headers=h, params={'personId': alice})
    assert first.status_code == 200
    assert first.json() == {'groupId': gid, 'personIds': [alice]}
    second = client.post(f'/api/admin/groups/{gid}/persons', headers=h, params={'personId': alice})
    assert second.json() == {'groupId': gid, 'personIds': [alice]}

    members = client.get(f'/api/admin/groups/{gid}/persons', headers=h).json()
    assert [m['name'] for m in members] == ['Alice']
    groups = client.get(f'/api/admin/persons/{alice}/groups', headers=h).json()
    assert [g['groupName'] for g in groups] == ['Tuesday Readers']


def test_removing_non_member_is_400(world):
    h, gid = world['headers'], world['group_id']
    r = client.delete(f"/api/admin/groups/{gid}/persons/{world['bob_id']}", headers=h)
    assert r.status_code == 400
    client.post(f'/api/admin/groups/{gid}/persons', headers=h, params={'personId': world['bob_id']})
    r2 = client.delete(f"/api/admin/groups/{gid}/persons/{world['bob_id']}", headers=h)
    assert r2.status_code == 200
    assert r2.json()['personIds'] == []


def test_membership_of_unknown_group_is_404(world):
    h = world['headers']
    assert client.get('/api/admin/groups/9999/persons', headers=h).status_code == 404
    r = client.post('/api/admin/groups/9999/persons', headers=h, params={'personId': world['alice_id']})
    assert r.status_code == 404


def test_group_name_unique_and_lookup(world):
    h = world['headers']
    dup = client.post('/api/admin/groups', headers=h, json={'groupName': 'Tuesday Readers'})
    assert dup.status_code == 400
    by_name = client.get('/api/admin/groups/name/Tuesday Readers', headers=h)
    assert by_name.status_code == 200
    assert by_name.json()['id'] == world['group_id']
    assert client.get('/api/admin/groups/name/Nobody', headers=h).status_code == 404


def test_semester_groups_and_books(world):
    h, sid, gid = world['headers'], world['semester_id'], world['group_id']
    r = client.post(f'/api/admin/semesters/{sid}/groups', headers=h, params={'groupId': gid})
    assert r.json() == {'semesterId': sid, 'groupIds': [gid]}
    book = client.post('/api/admin/books', headers=h, json={'title': 'Mere Christianity', 'author': 'C. S. Lewis'}).json()
    r2 = client.post(f'/api/admin/semesters/{sid}/books', headers=h, params={'bookId': book['id']})
    assert r2.json() == {'semesterId': sid, 'bookIds': [book['id']]}
    assert [b['title'] for b in client.get(f'/api/admin/semesters/{sid}/books', headers=h).json()] == ['Mere Christianity']
    assert client.delete(f'/api/admin/semesters/{sid}/groups/{gid}', headers=h).json()['groupIds'] == []
    assert client.delete(f'/api/admin/semesters/{sid}/groups/{gid}', headers=h).status_code == 400


def test_book_search_is_case_insensitive(admin_headers):
    h = admin_headers
    client.post('/api/admin/books', headers=h, json={'title': 'The Screwtape Letters', 'author': 'C. S. Lewis'})
    client.post('/api/admin/books', headers=h, json={'title': 'Orthodoxy', 'author': 'G. K. Chesterton'})
    titles = client.get('/api/admin/books/search/title', headers=h, params={'keyword': 'SCREW'}).json()
    assert [b['title'] for b in titles] == ['The Screwtape Letters']
    authors = client.get('/api/admin/books/search/author', headers=h, params={'keyword': 'chester'}).json()
    assert [b['title'] for b in authors] == ['Orthodoxy']
    assert client.get('/api/admin/books/title/Orthodoxy', headers=h).status_code == 200
    assert len(client.get('/api/admin/books/author/C. S. Lewis', headers=h).json()) == 1


def test_book_requires_title_and_author(admin_headers):
    r = client.post('/api/admin/books', headers=admin_headers, json={'title': '  ', 'author': 'Someone'})
    assert r.status_code == 400
    r2 = client.post('/api/admin/books', headers=admin_headers, json={'title': 'Untitled'})
    assert r2.status_code == 400


def test_person_name_unique(admin_headers):
    assert client.post('/api/admin/persons', headers=admin_headers, json={'name': 'Dana', 'password': 'x'}).status_code == 201
    r = client.post('/api/admin/persons', headers=admin_headers, json={'name': 'Dana', 'password': 'y'})
    assert r.status_code == 400


def test_deleting_referenced_person_is_rejected(world):
    h = world['headers']
    client.post('/api/admin/participations', headers=h, params={
        'semesterId': world['semester_id'], 'groupId': world['group_id'], 'personId': world['alice_id'],
    }, json={'status': 'ontime', 'participationDate': '2026-03-10'})
    r = client.delete(f"/api/admin/persons/{world['alice_id']}", headers=h)
    assert r.status_code == 400
    # an unreferenced member can go; its membership rows go with it
    gid = world['group_id']
    client.post(f'/api/admin/groups/{gid}/persons', headers=h, params={'personId': world['bob_id']})
    r2 = client.delete(f"/api/admin/persons/{world['bob_id']}", headers=h)
    assert r2.json() == {'success': True, 'message': 'Person deleted successfully'}
    assert client.get(f'/api/admin/groups/{gid}/persons', headers=h).json() == []


def test_deleting_semester_removes_its_assignments(world):
    h, sid = world['headers'], world['semester_id']
    a = client.post('/api/admin/assignments', headers=h, params={'semesterId': sid}, json={
        'title': 'Chapters 1-3', 'assignedDate': '2026-03-02',
    })
    assert a.status_code == 201
    assert a.json()['semesterId'] == sid
    assert len(client.get(f'/api/admin/assignments/semester/{sid}', headers=h).json()) == 1
    assert client.delete(f'/api/admin/semesters/{sid}', headers=h).status_code == 200
    assert client.get(f"/api/admin/assignments/{a.json()['id']}", headers=h).status_code == 404


def test_semester_user_books(world):
    h, sid, pid = world['headers'], world['semester_id'], world['alice_id']
    book = client.post('/api/admin/books', headers=h, json={'title': 'Orthodoxy', 'author': 'G. K. Chesterton'}).json()
    r = client.post('/api/admin/semester-user-books', headers=h, params={
        'semesterId': sid, 'personId': pid, 'bookId': book['id'],
    }, json={'status': 'reading', 'date': '2026-03-05'})
    assert r.status_code == 201
    entry = r.json()
    assert entry['date'] == '2026-03-05'
    assert entry['book']['title'] == 'Orthodoxy'
    assert entry['person']['name'] == 'Alice'

    listed = client.get(f'/api/admin/semester-user-books/semester/{sid}/person/{pid}', headers=h).json()
    assert [e['id'] for e in listed] == [entry['id']]
    upd = client.put(f"/api/admin/semester-user-books/{entry['id']}", headers=h, json={'status': 'finished'})
    assert upd.json()['status'] == 'finished'
    assert upd.json()['date'] == '2026-03-05'
    # the book is referenced now
    assert client.delete(f"/api/admin/books/{book['id']}", headers=h).status_code == 400
    missing = client.post('/api/admin/semester-user-books', headers=h, params={
        'semesterId': sid, 'personId': pid, 'bookId': 9999,
    }, json={'status': 'reading', 'date': '2026-03-05'})
    assert missing.status_code == 404


def test_ids_outside_integer_range_are_400(world):
    h = world['headers']
    r = client.get(f'/api/admin/groups/{2**70}', headers=h)
    assert r.status_code == 400
    assert r.json()['success'] is False
    assert client.get('/api/admin/groups/0', headers=h).status_code == 400
    assert client.get(f'/api/admin/persons/{2**63}', headers=h).status_code == 400
    assert client.get(f'/api/admin/groups/{2**63 - 1}', headers=h).status_code == 404

    r = client.post(f"/api/admin/groups/{world['group_id']}/persons", headers=h, params={'personId': 2**70})
    assert r.status_code == 400
    r = client.get('/api/admin/participations/search', headers=h, params={
        'startDate': '2026-03-01', 'endDate': '2026-04-30', 'semesterId': -1,
    })
    assert r.status_code == 400
