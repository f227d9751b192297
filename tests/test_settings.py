import pytest
from pydantic import ValidationError

from voicenotes.core.settings import Settings, get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Voice Notes"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert isinstance(settings.database_url, str) and settings.database_url
    assert settings.collaborator_write_retries >= 1


def test_settings_singleton():
    assert get_settings() is get_settings()


def test_app_origin_from_environment(monkeypatch):
    monkeypatch.setenv("VOICENOTES_APP_ORIGIN", "https://notes.example.org/")
    settings = Settings()
    assert settings.app_origin == "https://notes.example.org"
    assert "https://notes.example.org" in settings.cors_origins


def test_typed_overrides_from_environment(monkeypatch):
    monkeypatch.setenv("VOICENOTES_COLLABORATOR_WRITE_RETRIES", "5")
    monkeypatch.setenv("VOICENOTES_DATABASE_URL", "sqlite:///./other.db")
    settings = Settings()
    assert settings.collaborator_write_retries == 5
    assert settings.database_url == "sqlite:///./other.db"


@pytest.mark.parametrize("value", ["abc", "0"])
def test_invalid_retry_count_is_rejected(monkeypatch, value):
    monkeypatch.setenv("VOICENOTES_COLLABORATOR_WRITE_RETRIES", value)
    with pytest.raises(ValidationError):
        Settings()
