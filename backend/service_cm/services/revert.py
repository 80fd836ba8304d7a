"""
Revert selection: choose a release tag and the version to revert to.
"""

import logging

from service_cm.errors import MalformedVersionError, NothingToRevertError
from service_cm.schemas.version import VersionTriple
from service_cm.services.tag_codec import release_tag_version
from service_cm.utils.tag_grammar import RELEASE_SUFFIX_PATTERN

logger = logging.getLogger(__name__)


class RevertSelection:
    """
    Picker over the release tags of a service.

    The first tag is selected initially. Selecting a tag assigns the
    version encoded in it; the assigned version may then be overridden.
    """

    def __init__(self, release_tags: list[str]):
        if not release_tags:
            raise NothingToRevertError("Nothing to revert to!")
        self.release_tags = list(release_tags)
        self.selected_tag = ""
        self.assigned_version: VersionTriple | None = None
        self.select(self.release_tags[0])

    def select(self, raw: str) -> VersionTriple:
        """
        Select a release tag and assign its version.

        Raises:
            LookupError: If the tag is not one of the offered release tags
            MalformedVersionError: If no version can be read from the tag
        """
        if raw not in self.release_tags:
            raise LookupError(f"Unknown release tag '{raw}'")
        version = release_tag_version(raw)
        self.selected_tag = raw
        self.assigned_version = version
        return version

    def assign(self, major: int, minor: int, build: int) -> VersionTriple:
        self.assigned_version = VersionTriple(major=major, minor=minor, build=build)
        return self.assigned_version


def versioned_release_tags(release_tags: list[str]) -> list[tuple[str, VersionTriple]]:
    """Pair each release tag with its version, skipping tags without one."""
    result = []
    for raw in release_tags:
        try:
            result.append((raw, release_tag_version(raw)))
        except MalformedVersionError:
            logger.warning(f"Ignored release tag without version '{raw}'")
    return result


def release_tag_prefix(business_function: str, container: str, service_name: str) -> str:
    return f"{business_function}.{container}.{service_name}_"


def service_release_tags(
    release_tags: list[str],
    business_function: str,
    container: str,
    service_name: str,
) -> list[tuple[str, VersionTriple]]:
    """
    Keep the release tags of exactly one service, paired with their versions.

    A listing by prefix also returns services whose name extends this
    one (``Svc`` and ``Svc_Extra``); after the prefix only an optional
    '<status>-' without '_' and the version may follow.
    """
    prefix = release_tag_prefix(business_function, container, service_name)
    own = []
    for raw in release_tags:
        if raw.startswith(prefix) and RELEASE_SUFFIX_PATTERN.fullmatch(raw[len(prefix):]):
            own.append(raw)
        else:
            logger.debug(f"Skipping release tag '{raw}' of another service")
    return versioned_release_tags(own)
