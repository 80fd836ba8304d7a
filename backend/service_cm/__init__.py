# Service CM Backend
"""
Service Configuration Management Backend

Encodes, parses and validates the feature tags that record the lifecycle
of a service (checkout, commit, release, revert and tag cleanup) in an
external version-control repository.

Architecture:
- Tag Codec: feature tag grammar, release tags and branch names
- Tag Index: ticket grouping and bulk selection of feature tags
- Version Policy: explicit version vs. adopted feature tag on checkout
- Annotation Validator: minimum-length gate for change/commit annotations
"""

__version__ = "1.0.0"
