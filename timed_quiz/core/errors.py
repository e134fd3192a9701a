"""Typed failures raised by the quiz core and mapped by the transport layer."""

from __future__ import annotations


class QuizServiceError(Exception):
    """Base class for every failure the quiz service surfaces to callers."""


class NotFoundError(QuizServiceError, LookupError):
    """Unknown quiz, attempt or question reference."""


class InvalidInputError(QuizServiceError, ValueError):
    """Missing or malformed input such as an empty participant name."""


class InvalidStateError(QuizServiceError, RuntimeError):
    """Mutation attempted on an attempt that has already been submitted."""


class UnauthorizedError(QuizServiceError):
    """Admin operation attempted without a valid shared secret."""
