from fastapi.testclient import TestClient

from readingclub.main import app

client = TestClient(app)

SEARCH = '/api/admin/participations/search'


def _seed(world):
    h = world['headers']
    rows = [
        ('alice_id', 'ontime', '2026-03-03'),
        ('alice_id', 'Late', '2026-03-10'),
        ('bob_id', 'late', '2026-03-10'),
        ('bob_id', 'absent', '2026-03-17'),
        ('alice_id', 'ontime', '2026-04-01'),
    ]
    ids = []
    for key, status, day in rows:
        r = client.post('/api/admin/participations', headers=h, params={
            'semesterId': world['semester_id'], 'groupId': world['group_id'], 'personId': world[key],
        }, json={'status': status, 'participationDate': day})
        ids.append(r.json()['id'])
    return ids


def test_start_after_end_is_400(world):
    r = client.get(SEARCH, headers=world['headers'], params={'startDate': '2026-04-01', 'endDate': '2026-03-01'})
    assert r.status_code == 400
    assert r.json()['success'] is False


def test_dates_are_required(world):
    r = client.get(SEARCH, headers=world['headers'], params={'startDate': '2026-03-01'})
    assert r.status_code == 400


def test_status_filter_ignores_case(world):
    _seed(world)
    params = {'startDate': '2026-03-01', 'endDate': '2026-03-31'}
    lower = client.get(SEARCH, headers=world['headers'], params=dict(params, status='late')).json()
    upper = client.get(SEARCH, headers=world['headers'], params=dict(params, status='LATE')).json()
    assert lower['totalElements'] == 2
    assert sorted(p['id'] for p in lower['content']) == sorted(p['id'] for p in upper['content'])


def test_date_range_is_inclusive_and_filters_combine(world):
    ids = _seed(world)
    h = world['headers']
    r = client.get(SEARCH, headers=h, params={'startDate': '2026-03-10', 'endDate': '2026-03-17'}).json()
    assert r['totalElements'] == 3
    r2 = client.get(SEARCH, headers=h, params={
        'startDate': '2026-03-01', 'endDate': '2026-04-30', 'personId': world['alice_id'], 'status': 'ontime',
    }).json()
    assert sorted(p['id'] for p in r2['content']) == sorted([ids[0], ids[4]])


def test_default_sort_and_pagination(world):
    ids = _seed(world)
    h = world['headers']
    base = {'startDate': '2026-03-01', 'endDate': '2026-04-30', 'size': 2}
    first = client.get(SEARCH, headers=h, params=dict(base, page=0)).json()
    assert first['totalElements'] == 5
    assert first['totalPages'] == 3
    assert first['number'] == 0
    assert first['size'] == 2
    # newest first; same-day rows are ordered by id descending
    assert [p['id'] for p in first['content']] == [ids[4], ids[3]]
    second = client.get(SEARCH, headers=h, params=dict(base, page=1)).json()
    assert [p['id'] for p in second['content']] == [ids[2], ids[1]]
    last = client.get(SEARCH, headers=h, params=dict(base, page=2)).json()
    assert [p['id'] for p in last['content']] == [ids[0]]


def test_sort_ascending_and_unknown_field(world):
    ids = _seed(world)
    h = world['headers']
    base = {'startDate': '2026-03-01', 'endDate': '2026-04-30'}
    asc = client.get(SEARCH, headers=h, params=dict(base, sort='participationDate,asc')).json()
    assert [p['id'] for p in asc['content']] == ids
    assert client.get(SEARCH, headers=h, params=dict(base, sort='color,asc')).status_code == 400


def test_page_bounds(world):
    h = world['headers']
    base = {'startDate': '2026-03-01', 'endDate': '2026-04-30'}
    assert client.get(SEARCH, headers=h, params=dict(base, page=-1)).status_code == 400
    assert client.get(SEARCH, headers=h, params=dict(base, size=0)).status_code == 400
    empty = client.get(SEARCH, headers=h, params=base).json()
    assert empty == {'content': [], 'totalElements': 0, 'totalPages': 0, 'number': 0, 'size': 20}


def test_page_offset_beyond_integer_range_is_400(world):
    r = client.get(SEARCH, headers=world['headers'], params={
        'startDate': '2026-03-01', 'endDate': '2026-04-30', 'page': 2**62, 'size': 20,
    })
    assert r.status_code == 400
    assert r.json() == {'success': False, 'error': 'Page index is too large'}
