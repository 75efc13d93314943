import logging
import os

import pytest
from pydantic import ValidationError as PydanticValidationError

from swipe_core.settings import Settings, load_settings
from swipe_logging.logger import configure_logging


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("TMDB_API_KEY", "env-key")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/2")
    monkeypatch.setenv("SESSION_TTL_SEC", "600")
    monkeypatch.setenv("STORAGE_NAMESPACE", "swipe:test:")

    s = Settings()

    assert s.tmdb_api_key == "env-key"
    assert s.redis_url == "redis://localhost:6379/2"
    assert s.session_ttl_sec == 600
    assert s.storage_namespace == "swipe:test:"
    assert s.tmdb_base_url == "https://api.themoviedb.org/3"


def test_load_settings_reads_dotenv(tmp_path, monkeypatch):
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    (tmp_path / ".env").write_text("TMDB_API_KEY=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    try:
        assert load_settings().tmdb_api_key == "from-dotenv"
    finally:
        # load_dotenv writes os.environ directly
        os.environ.pop("TMDB_API_KEY", None)


def test_invalid_timeout_rejected(monkeypatch):
    monkeypatch.setenv("TMDB_TIMEOUT_S", "0")

    with pytest.raises(PydanticValidationError):
        Settings()


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


def test_configure_logging_sets_levels(restore_root_logger):
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING

    with pytest.raises(ValueError):
        configure_logging("chatty")
