import pytest
from argon2 import PasswordHasher
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from talenthub.config import settings
from talenthub.database import get_db, init_db
from talenthub.main import app
from talenthub.utils import security


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def fast_hasher(monkeypatch):
    """Cheap argon2 parameters so tests don't spend seconds hashing."""
    monkeypatch.setattr(security, "ph", PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "TalentHub"
    data_path.mkdir()
    return data_path


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "talenthub.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def client(tmp_data, test_db):
    original_data_path = settings.data_path
    settings.data_path = tmp_data
    c = TestClient(app)
    yield c
    settings.data_path = original_data_path


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return (user_json, auth_headers)."""

    def _register(email, role="applicant", password="secret1", **extra):
        r = client.post("/api/auth/register", json={
            "first_name": extra.pop("first_name", "Test"),
            "last_name": extra.pop("last_name", "User"),
            "email": email,
            "password": password,
            "role": role,
            **extra,
        })
        assert r.status_code == 201, r.json()
        data = r.json()
        return data["user"], auth(data["token"])

    return _register


@pytest.fixture
def employer(register):
    return register("john@techcorp.com", role="employer", first_name="John")


@pytest.fixture
def applicant(register):
    return register("jane@example.com", role="applicant", first_name="Jane")


@pytest.fixture
def admin(register):
    return register("admin@talenthub.com", role="admin", first_name="Admin")


JOB_PAYLOAD = {
    "title": "Senior Frontend Developer",
    "company": "TechCorp Inc.",
    "location": "San Francisco, CA",
    "type": "FULL_TIME",
    "salary": "$120k - $160k",
    "description": "Build web applications with React.",
    "requirements": "React, TypeScript",
    "benefits": "Health insurance",
    "remote": True,
}


@pytest.fixture
def create_job(client):
    def _create_job(headers, **overrides):
        r = client.post("/api/jobs", json={**JOB_PAYLOAD, **overrides}, headers=headers)
        assert r.status_code == 201, r.json()
        return r.json()

    return _create_job


@pytest.fixture
def submit_application(client):
    def _submit(headers, job_id, resume=("resume.pdf", b"%PDF-1.4 resume", "application/pdf"), **form):
        files = {"resume": resume} if resume else {}
        if "cover_letter_file" in form:
            files["cover_letter_file"] = form.pop("cover_letter_file")
        return client.post(
            "/api/applications",
            data={"job_id": str(job_id), **form},
            files=files or None,
            headers=headers,
        )

    return _submit


@pytest.fixture
def job_payload():
    return dict(JOB_PAYLOAD)
