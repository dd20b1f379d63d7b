import json
import logging

from fastapi.testclient import TestClient

from readingclub.main import app

client = TestClient(app)


def test_health():
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}


def test_request_id_is_echoed_or_generated():
    r = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert r.headers['X-Request-ID'] == 'abc123'
    r2 = client.get('/health')
    assert len(r2.headers['X-Request-ID']) == 32


def test_errors_use_the_failure_envelope():
    r = client.get('/api/no-such-route')
    assert r.status_code == 404
    assert r.json()['success'] is False


def test_malformed_body_is_400(admin_headers):
    r = client.post('/api/admin/semesters', headers=admin_headers, json={
        'name': 'Bad', 'startDate': 'not-a-date', 'endDate': '2026-01-01',
    })
    assert r.status_code == 400
    assert r.json()['success'] is False
    assert 'startDate' in r.json()['error']


def test_api_requests_log_one_json_line(caplog):
    with caplog.at_level(logging.INFO, logger='readingclub.api'):
        client.get('/api/no-such-route', headers={'X-Request-ID': 'req-42'})
        client.get('/health')
    lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith('request_done ')]
    assert len(lines) == 1
    fields = json.loads(lines[0][len('request_done '):])
    assert fields['request_id'] == 'req-42'
    assert fields['path'] == '/api/no-such-route'
    assert fields['method'] == 'GET'
    assert fields['status_code'] == 404
    assert fields['duration_ms'] >= 0
