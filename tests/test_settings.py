import logging
import os

import pytest

from timed_quiz.core.quiz_service import QuizService, build_store
from timed_quiz.core.services.memory_store import InMemoryQuizStore
from timed_quiz.core.services.sql_store import SqlQuizStore
from timed_quiz.utils.logging_config import configure_logging
from timed_quiz.utils.settings import Settings, load_settings

_ENV_KEYS = ("QUIZ_HOST", "PORT", "ADMIN_TOKEN", "DATABASE_URL", "LOG_LEVEL", "SEED_SAMPLE_QUIZ")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


def test_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings == Settings()
    assert settings.port == 3000
    assert not settings.uses_memory_store


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ADMIN_TOKEN", "hunter2")
    monkeypatch.setenv("DATABASE_URL", "memory://")
    monkeypatch.setenv("SEED_SAMPLE_QUIZ", "no")

    settings = load_settings(str(tmp_path / "missing.env"))

    assert settings.port == 8080
    assert settings.admin_token == "hunter2"
    assert settings.uses_memory_store
    assert settings.seed_sample_quiz is False


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ADMIN_TOKEN=from-file\nLOG_LEVEL=DEBUG\n", encoding="utf-8")

    settings = load_settings(str(env_file))

    assert settings.admin_token == "from-file"
    assert settings.log_level == "DEBUG"


def test_bad_port_is_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT"):
        load_settings(str(tmp_path / "missing.env"))


def test_store_selection(tmp_path):
    assert isinstance(build_store(Settings(database_url="memory://")), InMemoryQuizStore)
    assert isinstance(build_store(Settings(database_url=f"sqlite:///{tmp_path / 'q.db'}")), SqlQuizStore)


def test_service_from_settings_seeds_sample_quiz():
    seeded = QuizService.from_settings(Settings(database_url="memory://"))
    empty = QuizService.from_settings(Settings(database_url="memory://", seed_sample_quiz=False))
    assert len(seeded.list_quizzes()) == 1
    assert empty.list_quizzes() == []


def test_configure_logging_returns_package_logger():
    logger = configure_logging("warning")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "timed_quiz"
