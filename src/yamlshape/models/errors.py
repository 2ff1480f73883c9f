"""Error taxonomy with YAML source position tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class SourceSpan(BaseModel):
    """Points to exact location in YAML source for error reporting."""

    file: str = "<string>"
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None

    def describe(self) -> str:
        return f"line {self.line}, column {self.column}"


class ErrorKind(StrEnum):
    TRAILING_CHARACTERS = "trailing_characters"
    TYPE_ERROR = "type_error"
    UNEXPECTED_ELEMENT = "unexpected_element"
    NUMBER_PARSE = "number_parse"
    BOOL_PARSE = "bool_parse"
    EARLY_TERMINATION = "early_termination"
    SCAN = "scan"
    CUSTOM = "custom"
    LIMIT_EXCEEDED = "limit_exceeded"


class YamlShapeError(Exception):
    """Base for every decode/encode failure.

    ``span`` locates the fault in the source document when known.  ``path``
    is the dotted field path (``addresses[1].street``) filled in by the
    shape layer while the error propagates out of nested values.
    """

    kind: ErrorKind = ErrorKind.CUSTOM

    def __init__(self, message: str, span: SourceSpan | None = None) -> None:
        self.message = message
        self.span = span
        self.path: str | None = None
        super().__init__(message)

    @classmethod
    def custom(cls, message: object) -> CustomError:
        """Build the error raised by the shape layer itself."""
        return CustomError(str(message))

    def prefix_path(self, segment: str) -> None:
        """Prepend one path segment (``name`` or ``[i]``)."""
        if self.path is None:
            self.path = segment
        elif self.path.startswith("["):
            self.path = f"{segment}{self.path}"
        else:
            self.path = f"{segment}.{self.path}"

    def __str__(self) -> str:
        text = self.message
        if self.span is not None:
            text = f"{text} at {self.span.describe()}"
        if self.path:
            text = f"{text} (at {self.path})"
        return text


class TrailingCharactersError(YamlShapeError):
    """Reserved: trailing content is reported as an unexpected element."""

    kind = ErrorKind.TRAILING_CHARACTERS

    def __init__(self, span: SourceSpan | None = None) -> None:
        super().__init__("Trailing characters", span)


class InvalidTypeError(YamlShapeError):
    """Shape mismatch without richer context."""

    kind = ErrorKind.TYPE_ERROR

    def __init__(self, message: str = "Invalid type", span: SourceSpan | None = None) -> None:
        super().__init__(message, span)


class UnexpectedElementError(YamlShapeError):
    """A structural event arrived where another kind was required."""

    kind = ErrorKind.UNEXPECTED_ELEMENT

    def __init__(self, event_name: str, span: SourceSpan | None, location: str) -> None:
        self.event_name = event_name
        self.location = location
        super().__init__(f"Unexpected element {event_name} (in {location})", span)


class NumberParseError(YamlShapeError):
    """A scalar could not be parsed as the requested numeric width."""

    kind = ErrorKind.NUMBER_PARSE

    def __init__(
        self, text: str, detail: str, type_name: str, span: SourceSpan | None = None
    ) -> None:
        self.text = text
        self.detail = detail
        self.type_name = type_name
        super().__init__(f"{detail}: '{text}' is not a valid {type_name}", span)


class BoolParseError(YamlShapeError):
    """A scalar is not a member of either boolean literal family."""

    kind = ErrorKind.BOOL_PARSE

    def __init__(self, text: str, span: SourceSpan | None = None) -> None:
        self.text = text
        super().__init__(f"'{text}' is not a boolean", span)


class EarlyTerminationError(YamlShapeError):
    """The event stream ended before the document was complete."""

    kind = ErrorKind.EARLY_TERMINATION

    def __init__(self) -> None:
        super().__init__("Event stream ended before the document was complete")


class ScanError(YamlShapeError):
    """Wraps a lexical error raised by ruamel.yaml, message kept verbatim."""

    kind = ErrorKind.SCAN

    def __init__(self, cause: Exception, span: SourceSpan | None = None) -> None:
        self.cause = cause
        super().__init__(str(cause).strip(), span)

    def __str__(self) -> str:
        # ruamel.yaml messages already carry the position
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message


class CustomError(YamlShapeError):
    """Raised by the shape layer: unknown/missing fields, unknown variants."""

    kind = ErrorKind.CUSTOM

    def __init__(self, message: str) -> None:
        super().__init__(message)


class LimitExceededError(YamlShapeError):
    """Input violates the configured size or nesting limits."""

    kind = ErrorKind.LIMIT_EXCEEDED
