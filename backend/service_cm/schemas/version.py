"""
Version value types.
"""

from enum import IntEnum

from pydantic import BaseModel, Field

from service_cm.errors import MalformedVersionError
from service_cm.utils.tag_grammar import VERSION_PATTERN


class VersionOrdering(IntEnum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


class VersionTriple(BaseModel):
    """
    Immutable (major, minor, build) version.

    Ordered lexicographically on (major, minor, build) and serialized as
    'V<major>P<minor>B<build>'.
    """

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    build: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, text: str) -> "VersionTriple":
        """
        Parse 'V<major>P<minor>B<build>'.

        Raises:
            MalformedVersionError: If the text has any other shape
        """
        match = VERSION_PATTERN.fullmatch(text or "")
        if match is None:
            raise MalformedVersionError(text)
        try:
            major, minor, build = (int(part) for part in match.groups())
        except ValueError:
            # Numbers beyond the interpreter's integer string limit
            raise MalformedVersionError(text) from None
        return cls(major=major, minor=minor, build=build)

    @classmethod
    def from_major_minor(cls, major: int, minor: int, build: int = 0) -> "VersionTriple":
        return cls(major=major, minor=minor, build=build)

    def format(self) -> str:
        return f"V{self.major}P{self.minor}B{self.build}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.build)

    def next_minor(self, build: int | None = None) -> "VersionTriple":
        """Propose the next minor version, keeping the current build unless one is given."""
        return VersionTriple(
            major=self.major,
            minor=self.minor + 1,
            build=self.build if build is None else build,
        )

    def __str__(self) -> str:
        return self.format()

    def __lt__(self, other):
        if not isinstance(other, VersionTriple):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __le__(self, other):
        if not isinstance(other, VersionTriple):
            return NotImplemented
        return self.as_tuple() <= other.as_tuple()

    def __gt__(self, other):
        if not isinstance(other, VersionTriple):
            return NotImplemented
        return self.as_tuple() > other.as_tuple()

    def __ge__(self, other):
        if not isinstance(other, VersionTriple):
            return NotImplemented
        return self.as_tuple() >= other.as_tuple()


def compare(a: VersionTriple, b: VersionTriple) -> VersionOrdering:
    """Compare two versions lexicographically."""
    if a.as_tuple() < b.as_tuple():
        return VersionOrdering.LESS
    if a.as_tuple() > b.as_tuple():
        return VersionOrdering.GREATER
    return VersionOrdering.EQUAL
