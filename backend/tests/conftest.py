import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from campus_portal.database import Base, get_db
from campus_portal.main import app
from campus_portal.models.user import User
from campus_portal.services.auth_service import hash_password

TEST_DB_URL = "sqlite:///./test_campus_portal.db"
TEST_PASSWORD = "password123"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    from campus_portal.config import settings
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db, fast_hashing):
    users = {
        "admin": User(name="Admin", email="admin@campus.edu", role="admin"),
        "faculty": User(name="Faculty", email="faculty@campus.edu", role="faculty"),
        "student": User(name="Student", email="student@campus.edu", role="student"),
        "student2": User(name="Student Two", email="student2@campus.edu", role="student"),
    }
    for u in users.values():
        u.password_hash = hash_password(TEST_PASSWORD)
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


def get_token(client, email: str, password: str = TEST_PASSWORD) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
