"""
Tag grammar constants and low-level helpers.

Feature tags look like:
    feature/<ticket-id>/<business-function>.<container>/<service>_V<major>P<minor>B<build>
"""

import re

from service_cm.errors import InvalidSegmentError

# Separators reserved by the grammar
SEGMENT_SEPARATOR = "/"
PATH_SEPARATOR = "."
VERSION_MARKER = "_V"

DEFAULT_FEATURE_PREFIX = "feature"
FEATURE_TAG_SEGMENTS = 4

# ASCII digits only; int() would also accept signs, underscores and unicode digits.
VERSION_PATTERN = re.compile(r"V([0-9]+)P([0-9]+)B([0-9]+)")
MAJOR_MINOR_PATTERN = re.compile(r"\s*([0-9]+)\.([0-9]+)\s*")
# What follows "<bf>.<container>.<service>_" in a release tag
RELEASE_SUFFIX_PATTERN = re.compile(r"(?:[^_]+-)?V[0-9]+P[0-9]+B[0-9]+")

RESERVED_CHARACTERS: tuple[str, ...] = (SEGMENT_SEPARATOR, PATH_SEPARATOR)


def check_segment(field: str, value: str) -> str:
    """
    Validate a single structured tag field before encoding.

    Args:
        field: Field name used in the error message
        value: Field value

    Returns:
        The unchanged value

    Raises:
        InvalidSegmentError: If the value is empty or holds a reserved character
    """
    if not value:
        raise InvalidSegmentError(field, value, "must not be empty")
    for reserved in RESERVED_CHARACTERS:
        if reserved in value:
            raise InvalidSegmentError(field, value, f"must not contain '{reserved}'")
    return value


def split_version_suffix(text: str) -> tuple[str, str] | None:
    """
    Split '<name>_V<major>P<minor>B<build>' at the first version marker.

    Only the position of '_V' is searched for; 'P' and 'B' are located
    relative to it by the version parser, so a name that itself contains
    '_V' is split too early.

    Returns:
        (name, version_text) with version_text starting at 'V', or None
        when there is no marker or the name part is empty.
    """
    index = text.find(VERSION_MARKER)
    if index <= 0:
        return None
    return text[:index], text[index + 1:]
