"""
Feature Tag Codec.

Encodes and decodes the feature tag grammar used to record service
checkouts in the CM repository:

    feature/<ticket-id>/<business-function>.<container>/<service>_V<major>P<minor>B<build>

Also builds release tag and branch names for a service.
"""

import logging
from collections.abc import Iterable

from service_cm.errors import InvalidSegmentError, MalformedVersionError
from service_cm.schemas.feature_tag import FeatureTag, NonStandardTag
from service_cm.schemas.version import VersionTriple
from service_cm.utils.tag_grammar import (
    DEFAULT_FEATURE_PREFIX,
    FEATURE_TAG_SEGMENTS,
    PATH_SEPARATOR,
    SEGMENT_SEPARATOR,
    VERSION_MARKER,
    check_segment,
    split_version_suffix,
)

logger = logging.getLogger(__name__)


class FeatureTagCodec:
    """
    Codec for feature tags.

    Decoding never raises: anything that does not follow the grammar is
    returned as a NonStandardTag so that one foreign tag cannot break a
    listing of many.
    """

    def __init__(self, prefix: str = DEFAULT_FEATURE_PREFIX):
        self.prefix = prefix

    def decode(self, raw: str) -> FeatureTag | NonStandardTag:
        """
        Decode a raw repository tag.

        Args:
            raw: Tag name as listed by the repository

        Returns:
            FeatureTag on success, NonStandardTag describing the problem otherwise
        """
        segments = raw.split(SEGMENT_SEPARATOR)
        if len(segments) != FEATURE_TAG_SEGMENTS:
            return NonStandardTag(
                raw=raw,
                reason=f"expected {FEATURE_TAG_SEGMENTS} segments, found {len(segments)}",
            )

        prefix, ticket_id, service_path, leaf = segments
        if prefix != self.prefix:
            return NonStandardTag(raw=raw, reason=f"prefix is not '{self.prefix}'")
        if not ticket_id:
            return NonStandardTag(raw=raw, reason="empty ticket id")

        business_function, sep, container = service_path.rpartition(PATH_SEPARATOR)
        if not sep or not business_function or not container:
            return NonStandardTag(
                raw=raw, reason="expected '<business-function>.<container>'"
            )

        parts = split_version_suffix(leaf)
        if parts is None:
            return NonStandardTag(raw=raw, reason="missing '<service>_V' version suffix")
        service_name, version_text = parts

        try:
            version = VersionTriple.parse(version_text)
        except MalformedVersionError as e:
            return NonStandardTag(raw=raw, reason=str(e))

        return FeatureTag(
            ticket_id=ticket_id,
            business_function=business_function,
            container=container,
            service_name=service_name,
            version=version,
            raw=raw,
        )

    def decode_all(
        self, raws: Iterable[str]
    ) -> tuple[list[FeatureTag], list[NonStandardTag]]:
        """
        Decode a list of tags, separating valid from non-standard ones.

        Non-standard tags are logged and returned separately; they never
        abort decoding of the remaining entries.
        """
        tags: list[FeatureTag] = []
        rejected: list[NonStandardTag] = []
        for raw in raws:
            result = self.decode(raw)
            if isinstance(result, NonStandardTag):
                logger.warning(f"Ignored non-standard tag '{raw}': {result.reason}")
                rejected.append(result)
            else:
                tags.append(result)
        return tags, rejected

    def encode(
        self,
        ticket_id: str,
        business_function: str,
        container: str,
        service_name: str,
        version: VersionTriple,
    ) -> str:
        """
        Build a feature tag from its fields.

        Raises:
            InvalidSegmentError: If a field is empty or contains '/' or '.',
                or the service name contains the '_V' version marker
        """
        check_segment("ticket_id", ticket_id)
        check_segment("business_function", business_function)
        check_segment("container", container)
        check_segment("service_name", service_name)
        if VERSION_MARKER in service_name:
            raise InvalidSegmentError(
                "service_name", service_name, f"must not contain '{VERSION_MARKER}'"
            )

        return SEGMENT_SEPARATOR.join(
            [
                self.prefix,
                ticket_id,
                f"{business_function}{PATH_SEPARATOR}{container}",
                f"{service_name}_{version.format()}",
            ]
        )

    def create(
        self,
        ticket_id: str,
        business_function: str,
        container: str,
        service_name: str,
        version: VersionTriple,
    ) -> FeatureTag:
        """Encode the fields and return the resulting FeatureTag."""
        raw = self.encode(ticket_id, business_function, container, service_name, version)
        return FeatureTag(
            ticket_id=ticket_id,
            business_function=business_function,
            container=container,
            service_name=service_name,
            version=version,
            raw=raw,
        )


def encode_release_tag(
    business_function: str,
    container: str,
    service_name: str,
    version: VersionTriple,
    operational_status: str | None = None,
) -> str:
    """
    Build the tag pushed when a service is released.

    Examples:
        ("3010.01", "MyContainer", "MyService", V1P1B4) ->
            "3010.01.MyContainer.MyService_V1P1B4"
    """
    name = f"{business_function}.{container}.{service_name}_"
    if operational_status:
        name += f"{operational_status}-"
    return name + version.format()


def release_tag_version(raw: str) -> VersionTriple:
    """
    Extract the version from a release tag.

    The version starts after the last '_V' or '-V' marker, the latter
    being used when an operational status precedes the version.

    Raises:
        MalformedVersionError: If no version can be extracted
    """
    index = max(raw.rfind(VERSION_MARKER), raw.rfind("-V"))
    if index < 0:
        raise MalformedVersionError(raw)
    return VersionTriple.parse(raw[index + 1:])


def branch_name(
    business_function: str,
    container: str,
    service_name: str,
    version: VersionTriple,
    operational_status: str | None = None,
) -> str:
    """Name of the working branch used while a service is checked out."""
    name = f"{business_function}.{container}_{service_name}_"
    if operational_status:
        name += f"{operational_status}_"
    return name + version.format()
