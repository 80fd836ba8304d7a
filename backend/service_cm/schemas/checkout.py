"""
Models for the checkout version policy: state and the events that drive it.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from service_cm.schemas.feature_tag import FeatureTag
from service_cm.schemas.version import VersionTriple


class PolicyMode(str, Enum):
    UNINITIALIZED = "Uninitialized"
    USING_EXPLICIT_VERSION = "UsingExplicitVersion"
    USING_FEATURE_TAG = "UsingFeatureTag"


class PolicyState(BaseModel):
    """Snapshot of the version policy; replaced, never mutated."""

    mode: PolicyMode = PolicyMode.UNINITIALIZED
    version: VersionTriple | None = None
    tag: FeatureTag | None = None

    model_config = {"frozen": True}


class ExplicitVersionEntered(BaseModel):
    """User typed '<major>.<minor>' in the new version field."""

    kind: Literal["explicit_version"] = "explicit_version"
    text: str


class FeatureTagSelected(BaseModel):
    """User adopted an existing feature tag."""

    kind: Literal["feature_tag"] = "feature_tag"
    tag: FeatureTag


PolicyEvent = ExplicitVersionEntered | FeatureTagSelected


class CurrentVersion(BaseModel):
    """Major/minor version of the service being checked out."""

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
