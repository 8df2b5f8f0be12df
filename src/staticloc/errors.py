from __future__ import annotations

from collections.abc import Sequence

from .models import ErrorKind, ReplacementFailure


class LocalizationError(Exception):
    """Base error. `kind` lets callers branch without matching on exception classes."""

    kind: ErrorKind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(LocalizationError):
    kind = ErrorKind.PARSE_ERROR


class InvalidPattern(ParseError):
    def __init__(self, pattern: str, detail: str = "") -> None:
        message = f"invalid regular expression `{pattern}`"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.pattern = pattern


class MissingColumn(LocalizationError):
    kind = ErrorKind.MISSING_COLUMN

    def __init__(self, code: str, header: Sequence[str]) -> None:
        super().__init__(f"{code} not listed in [{','.join(header)}]")
        self.code = code
        self.header = list(header)


class FontLoadFailure(LocalizationError):
    kind = ErrorKind.FONT_LOAD_FAILURE

    def __init__(self, font: object, detail: str = "") -> None:
        message = f"cannot load font {font}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.font = font


class BatchFailure(LocalizationError):
    """Raised when at least one node of a batch cannot be translated."""

    def __init__(self, failures: Sequence[ReplacementFailure]) -> None:
        super().__init__("found some untranslatable nodes")
        self.failures = list(failures)

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        return self.failures[0].kind if self.failures else ErrorKind.NO_TRANSLATION
