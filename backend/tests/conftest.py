import os
import tempfile
from pathlib import Path

import pytest

# settings are read at import time, so configure before the app is imported
_DB_PATH = Path(tempfile.mkdtemp(prefix="readingclub-tests-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ.setdefault("ENV", "dev")

from sqlmodel import Session  # noqa: E402

from readingclub.database import create_db_and_tables, drop_db_and_tables, engine  # noqa: E402
from readingclub.routers.common import login_throttle  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test an empty schema and a clean login throttle."""
    drop_db_and_tables()
    create_db_and_tables()
    login_throttle.clear()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def admin_headers():
    from fastapi.testclient import TestClient
    from readingclub.main import app

    client = TestClient(app)
    r = client.post('/api/auth/register', json={
        'username': 'root', 'name': 'Root Admin', 'password': 'password123', 'type': 'superadmin',
    })
    assert r.status_code == 201
    r = client.post('/api/auth/login', json={'username': 'root', 'password': 'password123'})
    assert r.status_code == 200
    return {'Authorization': f"Bearer {r.json()['token']}"}


@pytest.fixture
def world(admin_headers):
    """A semester, a group and two persons, created through the API."""
    from fastapi.testclient import TestClient
    from readingclub.main import app

    client = TestClient(app)
    h = admin_headers
    semester = client.post('/api/admin/semesters', headers=h, json={
        'name': 'Spring 2026', 'startDate': '2026-03-01', 'endDate': '2026-06-30',
    }).json()
    group = client.post('/api/admin/groups', headers=h, json={'groupName': 'Tuesday Readers'}).json()
    alice = client.post('/api/admin/persons', headers=h, json={'name': 'Alice', 'password': 'alicepw'}).json()
    bob = client.post('/api/admin/persons', headers=h, json={'name': 'Bob', 'password': 'bobpw'}).json()
    return {
        'headers': h,
        'semester_id': semester['id'],
        'group_id': group['id'],
        'alice_id': alice['id'],
        'bob_id': bob['id'],
    }
