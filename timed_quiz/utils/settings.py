"""Runtime settings read from the environment and an optional ``.env`` file."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from timed_quiz.constants.network_constants import DEFAULT_ADMIN_TOKEN, DEFAULT_HOST, DEFAULT_PORT

MEMORY_DATABASE_URL = "memory://"
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    admin_token: str = DEFAULT_ADMIN_TOKEN
    database_url: str = "sqlite:///quizzes.db"
    log_level: str = "INFO"
    seed_sample_quiz: bool = True

    @property
    def uses_memory_store(self) -> bool:
        return self.database_url == MEMORY_DATABASE_URL


def load_settings(env_file: str | None = None) -> Settings:
    """Build settings from environment variables, loading ``.env`` first."""
    load_dotenv(env_file)
    defaults = Settings()
    raw_port = os.getenv("PORT")
    try:
        port = int(raw_port) if raw_port else defaults.port
    except ValueError as exc:
        raise ValueError(f"PORT must be an integer, got {raw_port!r}") from exc

    raw_seed = os.getenv("SEED_SAMPLE_QUIZ")
    return Settings(
        host=os.getenv("QUIZ_HOST", defaults.host),
        port=port,
        admin_token=os.getenv("ADMIN_TOKEN", defaults.admin_token),
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        seed_sample_quiz=defaults.seed_sample_quiz if raw_seed is None else raw_seed.strip().lower() in _TRUE_VALUES,
    )
