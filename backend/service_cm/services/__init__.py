"""
Configuration management services.

- Codec: feature tag grammar (decode/encode), release tags, branch names
- Index: ticket grouping and selection of feature tags
- Policy: checkout version decision
- Annotation: commit/change annotation gate
"""

from service_cm.services.annotation import AnnotationValidator
from service_cm.services.revert import RevertSelection
from service_cm.services.tag_codec import FeatureTagCodec
from service_cm.services.tag_index import FeatureTagIndex, TagSelectionSet
from service_cm.services.version_policy import CheckoutSession, ServiceVersionPolicy

__all__ = [
    "FeatureTagCodec",
    "FeatureTagIndex",
    "TagSelectionSet",
    "ServiceVersionPolicy",
    "CheckoutSession",
    "AnnotationValidator",
    "RevertSelection",
]
