"""Utilities for importing quizzes from a human-friendly text file.

File format: a header followed by question blocks separated by blank lines
or '---':

    TITLE: Quiz title
    SUBJECT: Subject name
    DURATION: minutes (optional, defaults to 15)
    NEGATIVE: penalty per wrong answer (optional, defaults to 0)

    Q: Question text (supports markdown). Additional lines until the next
       marker are treated as part of the question.
    A: First option text
    B: Second option text
    ...                 (any number of lettered options, at least one)
    CORRECT: letter     (optional; omit to leave the question unscored)

Example:

    TITLE: Warm-up
    SUBJECT: Maths
    DURATION: 5

    Q: What is $2 + 2$?
    A: 3
    B: 4
    CORRECT: B
"""

from __future__ import annotations

import string
from pathlib import Path

from timed_quiz.core.services.quiz_catalog import OptionDraft, QuestionDraft, QuizDraft


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


_OPTION_LETTERS = string.ascii_uppercase
_HEADER_KEYS = ("TITLE", "SUBJECT", "DURATION", "NEGATIVE")


def load_quiz_from_file(file_path: Path) -> QuizDraft:
    text = file_path.read_text(encoding="utf-8")
    return parse_quiz_text(text)


def parse_quiz_text(text: str) -> QuizDraft:
    blocks = _split_blocks(text)
    if not blocks:
        raise QuizImportError("Quiz file is empty.")

    header = _parse_header(blocks[0])
    questions = [_parse_block(block) for block in blocks[1:]]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    draft = QuizDraft(title=header["TITLE"], subject=header["SUBJECT"], questions=questions)
    if "DURATION" in header:
        draft.duration_minutes = _parse_number(header["DURATION"], "DURATION", int)
    if "NEGATIVE" in header:
        draft.negative_marking = _parse_number(header["NEGATIVE"], "NEGATIVE", float)
    return draft


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return blocks


def _parse_header(block: str) -> dict[str, str]:
    header: dict[str, str] = {}
    for raw_line in block.splitlines():
        key, sep, value = raw_line.strip().partition(":")
        key = key.strip().upper()
        if not sep or key not in _HEADER_KEYS:
            raise QuizImportError(f"Expected a header line (TITLE/SUBJECT/DURATION/NEGATIVE), got '{raw_line.strip()}'.")
        header[key] = value.strip()
    for required in ("TITLE", "SUBJECT"):
        if not header.get(required):
            raise QuizImportError(f"{required} is required in the quiz header.")
    return header


def _parse_number(raw_value: str, key: str, kind: type):
    try:
        return kind(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be a number, got '{raw_value}'.") from exc


def _parse_block(block: str) -> QuestionDraft:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            if letter in options:
                raise QuizImportError(f"Option {letter} is defined twice.")
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text missing (Q: ...)")
    if not options:
        raise QuizImportError("Each question must define at least one option.")

    expected = list(_OPTION_LETTERS[: len(options)])
    if sorted(options) != expected:
        raise QuizImportError(f"Options must use consecutive letters starting at A, got {', '.join(sorted(options))}.")
    if correct_letter is not None and correct_letter not in options:
        raise QuizImportError(f"CORRECT must be one of {', '.join(expected)}.")

    return QuestionDraft(
        statement=question_text,
        options=[
            OptionDraft(label=options[letter].strip(), is_correct=(letter == correct_letter))
            for letter in expected
        ],
    )
