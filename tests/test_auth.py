import pytest
from fastapi.testclient import TestClient

from voicenotes.core.security import create_access_token
from voicenotes.db.base import Base
from voicenotes.db.session import engine
from voicenotes.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_notes_require_auth():
    client = TestClient(app)
    response = client.get("/notes")
    assert response.status_code == 401


def test_invalid_token_rejected():
    client = TestClient(app)
    response = client.get("/notes", headers={"Authorization": "Bearer invalidtoken"})
    assert response.status_code == 401


def test_non_bearer_scheme_rejected():
    client = TestClient(app)
    token = create_access_token(user_id="alice")
    response = client.get("/notes", headers={"Authorization": f"Token {token}"})
    assert response.status_code == 401


def test_expired_token_rejected():
    client = TestClient(app)
    token = create_access_token(user_id="alice", expires_minutes=-1)
    response = client.get("/notes", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_valid_token_accepted():
    client = TestClient(app)
    token = create_access_token(user_id="alice")
    response = client.get("/notes", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == []
