from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


class QuizError(Exception):
    """Base class for failures of the question-set service."""

    status_code = 500


class ValidationError(QuizError):
    status_code = 400


class NotFound(QuizError):
    status_code = 404


class EmptySet(QuizError):
    status_code = 409


class Unavailable(QuizError):
    status_code = 503


def describe(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into 'field: message' pairs."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)
