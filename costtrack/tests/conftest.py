import pytest
from cachelib.file import FileSystemCache

from costtrack.app_factory import create_app
from costtrack.db.enums import UserRole
from costtrack.db.init_db import init_db
from costtrack.db.session import dispose_engine, get_session
from costtrack.services.user_service import UserService

PASSWORD = "correct-horse-battery"


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Fresh SQLite file per test; the engine is rebuilt from DATABASE_URL."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'costtrack_test.db'}")
    dispose_engine()
    init_db()
    yield
    dispose_engine()


@pytest.fixture
def users(database):
    """account -> user id"""
    db = get_session()
    try:
        user_service = UserService(db)
        pm = user_service.create_user(
            account="pm", password=PASSWORD, first_name="Pat", last_name="Morgan", role=UserRole.PM,
        )
        executive = user_service.create_user(
            account="exec", password=PASSWORD, first_name="Eve", last_name="Sato", role=UserRole.Executive,
        )
        ids = {"pm": pm.id, "exec": executive.id}
        db.commit()
        return ids
    finally:
        db.close()


@pytest.fixture
def app(database, tmp_path):
    return create_app("testing", test_config={
        "TESTING": True,
        "SESSION_CACHELIB": FileSystemCache(cache_dir=str(tmp_path / "sessions")),
    })


@pytest.fixture
def anon_client(app):
    return app.test_client()


def login(client, account, password=PASSWORD):
    return client.post("/api/login", json={"account": account, "password": password})


@pytest.fixture
def client(app, users):
    """Test client signed in as the PM."""
    test_client = app.test_client()
    response = login(test_client, "pm")
    assert response.status_code == 200, response.get_json()
    return test_client


@pytest.fixture
def exec_client(app, users):
    """Second client signed in as the executive."""
    test_client = app.test_client()
    response = login(test_client, "exec")
    assert response.status_code == 200, response.get_json()
    return test_client


@pytest.fixture
def db_session(database):
    db = get_session()
    yield db
    db.rollback()
    db.close()


@pytest.fixture
def make_project(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        body = {
            "name": f"Substation upgrade {counter['n']}",
            "projectNumber": f"P-{counter['n']:04d}",
            "budget": "10000.00",
            "projectType": "commercial",
        }
        body.update(overrides)
        response = client.post("/api/projects", json=body)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make


@pytest.fixture
def make_cost_code(client):
    counter = {"n": 0}

    def _make(category="labor", **overrides):
        counter["n"] += 1
        body = {
            "code": f"{category[:3].upper()}-{counter['n']:03d}",
            "description": f"{category} work",
            "category": category,
        }
        body.update(overrides)
        response = client.post("/api/cost-codes", json=body)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make


@pytest.fixture
def make_entry(client):
    def _make(project_id, cost_code_id, amount, entry_date="2024-03-01T00:00:00", **overrides):
        body = {
            "projectId": project_id,
            "costCodeId": cost_code_id,
            "description": "Cost entry",
            "amount": amount,
            "entryDate": entry_date,
        }
        body.update(overrides)
        response = client.post("/api/cost-entries", json=body)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make
