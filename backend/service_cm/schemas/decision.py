"""
Models for version decisions and commit annotations.
"""

from enum import Enum

from pydantic import BaseModel, model_validator

from service_cm.schemas.feature_tag import FeatureTag
from service_cm.schemas.version import VersionTriple


class VersionSource(str, Enum):
    """Where the outgoing version of a checkout comes from."""

    EXPLICIT_VERSION = "ExplicitVersion"
    FEATURE_TAG = "FeatureTag"


class VersionDecision(BaseModel):
    """
    The authoritative version of a checkout.

    Exactly one source is active: an explicitly typed version, or the
    version of an adopted feature tag.
    """

    source: VersionSource
    version: VersionTriple
    tag_ref: FeatureTag | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_source(self) -> "VersionDecision":
        if self.source == VersionSource.FEATURE_TAG:
            if self.tag_ref is None:
                raise ValueError("a feature tag decision requires tag_ref")
            if self.tag_ref.version != self.version:
                raise ValueError("version must equal the version of tag_ref")
        elif self.tag_ref is not None:
            raise ValueError("an explicit version decision must not carry tag_ref")
        return self


class AnnotationKind(str, Enum):
    """The two operations that require an annotation."""

    CHANGE = "change"
    COMMIT = "commit"


class CommitAnnotation(BaseModel):
    """Annotation entered for a change or commit, plus the release toggle."""

    text: str = ""
    release_requested: bool = False


class AnnotationCheck(BaseModel):
    """Outcome of annotation validation; ok=False means too short."""

    ok: bool
    required: int
    actual: int
    message: str | None = None


class CommitRequest(BaseModel):
    """Validated request handed to the CM repository collaborator."""

    kind: AnnotationKind
    annotation: str
    release_requested: bool = False
