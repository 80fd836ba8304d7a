"""
FastAPI dependency injection setup.

Provides factory functions for service instances used across routes.
Services receive their configuration here instead of looking it up.
"""

from functools import lru_cache

from service_cm.clients.tag_repository import GitHubTagRepository, TagRepository
from service_cm.config import get_settings
from service_cm.services.annotation import AnnotationValidator
from service_cm.services.tag_codec import FeatureTagCodec
from service_cm.services.tag_index import FeatureTagIndex


@lru_cache
def get_codec() -> FeatureTagCodec:
    """Get cached codec instance."""
    return FeatureTagCodec(prefix=get_settings().feature_tag_prefix)


@lru_cache
def get_index() -> FeatureTagIndex:
    """Get cached index over the configured codec."""
    return FeatureTagIndex(get_codec())


@lru_cache
def get_annotation_validator() -> AnnotationValidator:
    """Get cached annotation validator bound to the configured thresholds."""
    settings = get_settings()
    return AnnotationValidator(
        change_min_length=settings.change_annotation_min_length,
        commit_min_length=settings.commit_annotation_min_length,
    )


@lru_cache
def get_tag_repository() -> TagRepository:
    """Get cached CM repository client."""
    settings = get_settings()
    return GitHubTagRepository(
        repo=settings.github_repo,
        token=settings.github_token,
        api_version=settings.github_api_version,
    )
