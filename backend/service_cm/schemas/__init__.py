"""
Pydantic schemas for the CM core and API request/response models.
"""

from service_cm.schemas.decision import (
    AnnotationCheck,
    AnnotationKind,
    CommitAnnotation,
    CommitRequest,
    VersionDecision,
    VersionSource,
)
from service_cm.schemas.feature_tag import (
    FeatureTag,
    FeatureTagEntry,
    FeatureTagGroup,
    NonStandardTag,
)
from service_cm.schemas.version import VersionOrdering, VersionTriple, compare

__all__ = [
    "VersionTriple",
    "VersionOrdering",
    "compare",
    "FeatureTag",
    "FeatureTagEntry",
    "FeatureTagGroup",
    "NonStandardTag",
    "VersionDecision",
    "VersionSource",
    "AnnotationKind",
    "AnnotationCheck",
    "CommitAnnotation",
    "CommitRequest",
]
