"""Unit tests for src/core/config.py"""

import logging
from typing import Generator

import pytest

from src.core.config import DEFAULT_DATABASE_URL, Settings, configure_logging, get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Settings are cached per process: clear before and after each test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for variable in ("CHESS_DATABASE_URL", "CHESS_SQL_ECHO", "CHESS_LOG_LEVEL", "CHESS_DEFAULT_EVENT", "CHESS_DEFAULT_SITE"):
        monkeypatch.delenv(variable, raising=False)
    settings = Settings.from_env()
    assert settings == Settings()
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.sql_echo is False


def test_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("CHESS_SQL_ECHO", "yes")
    monkeypatch.setenv("CHESS_LOG_LEVEL", "debug")
    monkeypatch.setenv("CHESS_DEFAULT_EVENT", "Club night")
    settings = get_settings()
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.sql_echo is True
    assert settings.log_level == "DEBUG"
    assert settings.default_event == "Club night"


@pytest.fixture
def env_file(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """A .env file in the working directory. Variables it loads are removed again at teardown."""
    for variable in ("CHESS_DEFAULT_SITE", "CHESS_DEFAULT_EVENT"):
        # setenv records the original state, so monkeypatch restores it after load_dotenv wrote to os.environ
        monkeypatch.setenv(variable, "")
        monkeypatch.delenv(variable)
    (tmp_path / ".env").write_text("CHESS_DEFAULT_SITE=Lichess\nCHESS_DEFAULT_EVENT=From file\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path / ".env"


def test_read_from_env_file(env_file) -> None:
    settings = get_settings()
    assert settings.default_site == "Lichess"
    assert settings.default_event == "From file"


def test_environment_wins_over_env_file(env_file, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_DEFAULT_SITE", "Over the board")
    settings = get_settings()
    assert settings.default_site == "Over the board"
    assert settings.default_event == "From file"


def test_settings_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("CHESS_DEFAULT_SITE", "Somewhere else")
    assert get_settings() is first


def test_configure_logging() -> None:
    logger = logging.getLogger("src")
    handlers_before = list(logger.handlers)
    try:
        configure_logging("debug")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) >= 1
        configure_logging("info")
        # second call does not stack handlers
        assert len(logger.handlers) == max(len(handlers_before), 1)
    finally:
        logger.handlers = handlers_before
        logger.setLevel(logging.NOTSET)
