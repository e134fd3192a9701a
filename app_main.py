"""Application entry point for the timed quiz service."""

from __future__ import annotations

from timed_quiz.constants.network_constants import DEFAULT_ADMIN_TOKEN
from timed_quiz.core.quiz_service import QuizService
from timed_quiz.server.api_server import run_api_server
from timed_quiz.utils.logging_config import configure_logging
from timed_quiz.utils.settings import load_settings


def main() -> None:
    """Initialize logging, build the quiz service and serve the API."""
    settings = load_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting timed quiz service on %s:%d", settings.host, settings.port)
    if settings.admin_token == DEFAULT_ADMIN_TOKEN:
        logger.warning("ADMIN_TOKEN is not set; using the insecure default token")

    quiz_service = QuizService.from_settings(settings)
    run_api_server(
        quiz_service=quiz_service,
        admin_token=settings.admin_token,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
