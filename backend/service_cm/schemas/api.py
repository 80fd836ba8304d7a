"""
Pydantic models for API requests and responses.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from service_cm.schemas.checkout import CurrentVersion
from service_cm.schemas.decision import (
    AnnotationCheck,
    AnnotationKind,
    CommitRequest,
    VersionDecision,
)
from service_cm.schemas.feature_tag import FeatureTag, FeatureTagGroup, NonStandardTag
from service_cm.schemas.version import VersionTriple


class FeatureTagListResponse(BaseModel):
    """Feature tags grouped by ticket."""

    groups: list[FeatureTagGroup]
    skipped: list[NonStandardTag] = Field(default_factory=list)
    total: int


class CreateFeatureTagRequest(BaseModel):
    """Request for creating a new feature tag on a commit."""

    ticket_id: str
    business_function: str
    container: str
    service_name: str
    version: VersionTriple
    sha: str = Field(min_length=7)


class SelectionEvent(BaseModel):
    """A checkbox change in the ticket tree."""

    kind: Literal["group", "tag"]
    ticket_id: str
    raw: str | None = None
    checked: bool = True


class DeleteTagsRequest(BaseModel):
    """Selection events replayed on the current tag listing."""

    business_function: str | None = None
    container: str | None = None
    service_name: str | None = None
    events: list[SelectionEvent] = Field(default_factory=list)
    dry_run: bool = False


class DeleteTagsResponse(BaseModel):
    selected: list[str]
    deleted: list[str] = Field(default_factory=list)


class ReleaseTagInfo(BaseModel):
    tag: str
    version: VersionTriple


class ReleaseTagListResponse(BaseModel):
    tags: list[ReleaseTagInfo]
    total: int


class ExplicitVersionAction(BaseModel):
    kind: Literal["explicit_version"] = "explicit_version"
    text: str


class FeatureTagAction(BaseModel):
    kind: Literal["feature_tag"] = "feature_tag"
    tag: str


CheckoutAction = Annotated[
    ExplicitVersionAction | FeatureTagAction, Field(discriminator="kind")
]


class CheckoutDecisionRequest(BaseModel):
    """User actions of a checkout, in the order they were taken."""

    current_version: CurrentVersion
    ticket_id: str = ""
    project_order_id: str = ""
    actions: list[CheckoutAction] = Field(default_factory=list)
    pending_version_text: str | None = None
    create_new_feature_tag_version: bool = False


class RejectedAction(BaseModel):
    index: int
    error: str


class CheckoutDecisionResponse(BaseModel):
    decision: VersionDecision
    proposed: VersionTriple
    ready: bool
    create_new_feature_tag_version: bool = False
    rejected: list[RejectedAction] = Field(default_factory=list)


class CommitValidationRequest(BaseModel):
    kind: AnnotationKind = AnnotationKind.COMMIT
    text: str = ""
    release_requested: bool = False


class CommitValidationResponse(BaseModel):
    check: AnnotationCheck
    request: CommitRequest | None = None


class CreateFeatureTagResponse(BaseModel):
    tag: FeatureTag


class RevertRequest(BaseModel):
    """Release tag and optional version override for a revert."""

    business_function: str
    container: str
    service_name: str
    tag: str | None = None
    version: VersionTriple | None = None


class RevertResponse(BaseModel):
    tag: str
    version: VersionTriple
    available: list[str]
