from __future__ import annotations

from enum import Enum


class ParseErrorKind(str, Enum):
    EMPTY_OR_MALFORMED = "empty_or_malformed"
    INVALID_JSON = "invalid_json"


class ParseError(ValueError):
    """Raised when classifier text does not contain a usable JSON object."""

    def __init__(self, kind: ParseErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class InputErrorKind(str, Enum):
    MISSING_REQUIRED_FIELD = "missing_required_field"
    RESOURCE_NOT_FOUND = "resource_not_found"


class InputError(ValueError):
    def __init__(self, kind: InputErrorKind, field: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field
