from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from voicenotes.core.errors import RegistryFailure
from voicenotes.core.security import Identity, create_access_token
from voicenotes.core.settings import get_settings
from voicenotes.crud.crud_note import note_crud
from voicenotes.db.base import Base
from voicenotes.db.session import SessionLocal, engine
from voicenotes.main import app
from voicenotes.models.note import Note
from voicenotes.schemas.collaborator import CollaboratorInvite
from voicenotes.schemas.note import EntryCreate, NoteCreate
from voicenotes.services.collaborators import invite_collaborator
from voicenotes.services.sharing import generate_share_link, validate_share_token

ALICE = Identity(user_id="alice")


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def note_id(db) -> str:
    note_in = NoteCreate(title="Trip", entries=[EntryCreate(content="Pack charger")])
    return note_crud.create(db, obj_in=note_in, identity=ALICE).id


def token_from(url: str) -> str:
    return parse_qs(urlparse(url).query)["token"][0]


def test_share_url_format(db, note_id):
    result = generate_share_link(db, ALICE, note_id)
    assert result
    assert result.url == f"{get_settings().app_origin}/share/{note_id}?token={result.token}"
    assert token_from(result.url) == result.token


def test_token_round_trip(db, note_id):
    token = generate_share_link(db, ALICE, note_id).token

    assert validate_share_token(db, note_id, token) is True
    assert validate_share_token(db, note_id, token + "x") is False
    assert validate_share_token(db, note_id, "") is False


def test_regenerating_invalidates_old_token(db, note_id):
    first = generate_share_link(db, ALICE, note_id).token
    assert validate_share_token(db, note_id, first)

    second = generate_share_link(db, ALICE, note_id).token
    assert second != first
    assert validate_share_token(db, note_id, first) is False
    assert validate_share_token(db, note_id, second) is True


def test_note_without_token_never_validates(db, note_id):
    assert validate_share_token(db, note_id, "anything") is False


def test_unknown_note_never_validates(db):
    assert validate_share_token(db, "missing", "anything") is False


def test_token_is_scoped_to_its_note(db, note_id):
    other_id = note_crud.create(db, obj_in=NoteCreate(title="Other"), identity=ALICE).id
    token = generate_share_link(db, ALICE, note_id).token

    assert validate_share_token(db, other_id, token) is False


def test_editor_cannot_generate_link(db, note_id):
    assert invite_collaborator(db, ALICE, note_id, CollaboratorInvite(user_id="bob", permission="edit"))

    result = generate_share_link(db, Identity(user_id="bob"), note_id)
    assert not result
    assert result.error is RegistryFailure.UNAUTHORIZED
    assert result.url is None


def test_missing_note_reports_not_found(db):
    result = generate_share_link(db, ALICE, "missing")
    assert result.error is RegistryFailure.NOT_FOUND


def test_write_failure_reports_link_generation_error(db, note_id, monkeypatch):
    def broken_commit():
        raise OperationalError("UPDATE notes", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", broken_commit)

    result = generate_share_link(db, ALICE, note_id)
    assert result.error is RegistryFailure.LINK_GENERATION
    assert result.url is None
    with SessionLocal() as fresh:
        assert fresh.get(Note, note_id).sharing_token is None


def test_shared_view_with_valid_token():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {create_access_token(user_id='alice')}"}
    note = client.post(
        "/notes",
        json={"title": "Recipe", "entries": [{"content": "Flour"}]},
        headers=headers,
    ).json()
    invite = client.post(
        f"/notes/{note['id']}/collaborators",
        json={"user_id": "bob", "email": "bob@x.com"},
        headers=headers,
    )
    assert invite.status_code == 201

    link = client.post(f"/notes/{note['id']}/share-link", headers=headers)
    assert link.status_code == 201
    token = link.json()["token"]

    response = client.get(f"/share/{note['id']}", params={"token": token})
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Recipe"
    assert [e["content"] for e in data["entries"]] == ["Flour"]
    assert "collaborators" not in data

    assert client.get(f"/notes/{note['id']}", headers=headers).json()["has_share_link"] is True


def test_shared_view_rejects_bad_or_missing_token():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {create_access_token(user_id='alice')}"}
    note_id = client.post("/notes", json={"title": "Recipe"}, headers=headers).json()["id"]
    client.post(f"/notes/{note_id}/share-link", headers=headers)

    assert client.get(f"/share/{note_id}", params={"token": "guess"}).status_code == 404
    assert client.get(f"/share/{note_id}").status_code == 404
    assert client.get("/share/missing", params={"token": "guess"}).status_code == 404


def test_old_link_stops_working_after_rotation():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {create_access_token(user_id='alice')}"}
    note_id = client.post("/notes", json={"title": "Recipe"}, headers=headers).json()["id"]
    first = client.post(f"/notes/{note_id}/share-link", headers=headers).json()["token"]
    second = client.post(f"/notes/{note_id}/share-link", headers=headers).json()["token"]

    assert client.get(f"/share/{note_id}", params={"token": first}).status_code == 404
    assert client.get(f"/share/{note_id}", params={"token": second}).status_code == 200


def test_rotation_refreshes_updated_at(db, note_id):
    with SessionLocal() as fresh:
        before = fresh.get(Note, note_id).updated_at

    assert generate_share_link(db, ALICE, note_id)
    with SessionLocal() as fresh:
        after_first = fresh.get(Note, note_id).updated_at
    assert after_first > before

    assert generate_share_link(db, ALICE, note_id)
    with SessionLocal() as fresh:
        assert fresh.get(Note, note_id).updated_at > after_first
