"""
Exceptions raised by the configuration-management core.

Malformed repository tags are never raised; they are decoded into
NonStandardTag values and skipped. Everything here is recoverable
and maps to a rejected user input or a blocked action.
"""


class CMError(Exception):
    """Base class for configuration-management errors."""


class ParseError(CMError, ValueError):
    """Text could not be parsed into a version."""


class MalformedVersionError(ParseError):
    """Version suffix does not match V<major>P<minor>B<build>."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Malformed version '{text}', expected V<major>P<minor>B<build>")


class InvalidVersionFormatError(ParseError):
    """User-typed version is not two non-negative integers."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid version '{text}', expected <major>.<minor>")


class InvalidSegmentError(CMError, ValueError):
    """A tag field is empty or contains a character reserved by the grammar."""

    def __init__(self, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} '{value}': {reason}")


class AnnotationTooShortError(CMError):
    """Annotation text is below the minimum length of the operation."""

    def __init__(self, required: int, actual: int):
        self.required = required
        self.actual = actual
        super().__init__(
            f"Please enter at least a {required}-character description (got {actual})"
        )


class PolicyStateError(CMError):
    """Version policy was queried before it was initialized."""


class NothingToRevertError(CMError):
    """No release tags are available to revert to."""
