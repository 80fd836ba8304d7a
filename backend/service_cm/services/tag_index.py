"""
Feature Tag Index.

Groups a flat repository tag listing by ticket for presentation and
bulk selection, and collects the selected tags for deletion.
"""

import logging
from collections.abc import Iterable, Iterator

from service_cm.schemas.feature_tag import (
    FeatureTag,
    FeatureTagEntry,
    FeatureTagGroup,
)
from service_cm.services.tag_codec import FeatureTagCodec

logger = logging.getLogger(__name__)


class FeatureTagIndex:
    """
    Two-level index of feature tags: ticket -> leaf tags.

    Groups and members keep the order in which they first appear in the
    listing, so repeated builds from the same input are identical.
    """

    def __init__(self, codec: FeatureTagCodec):
        self.codec = codec

    def build(
        self,
        tags: Iterable[str],
        service: tuple[str, str, str] | None = None,
    ) -> list[FeatureTagGroup]:
        """
        Decode and group a tag listing.

        Non-standard tags are logged by the codec and left out; use
        ``codec.decode_all`` with ``group`` to report them.
        """
        decoded, _ = self.codec.decode_all(tags)
        return self.group(decoded, service=service)

    def group(
        self,
        tags: Iterable[FeatureTag],
        service: tuple[str, str, str] | None = None,
    ) -> list[FeatureTagGroup]:
        """
        Group decoded feature tags by ticket.

        Args:
            tags: Decoded feature tags
            service: Optional (business_function, container, service_name);
                when given, only tags of that service are kept

        Returns:
            One group per distinct ticket id, never empty
        """
        groups: dict[str, FeatureTagGroup] = {}
        for tag in tags:
            if service is not None and not tag.matches_service(*service):
                logger.debug(f"Skipping tag '{tag.raw}' of service {tag.service_path}")
                continue
            group = groups.get(tag.ticket_id)
            if group is None:
                group = FeatureTagGroup(ticket_id=tag.ticket_id)
                groups[tag.ticket_id] = group
            group.members.append(FeatureTagEntry(tag=tag))

        logger.debug(
            f"Indexed {sum(len(g.members) for g in groups.values())} tags "
            f"in {len(groups)} tickets"
        )
        return list(groups.values())

    @staticmethod
    def toggle_group(group: FeatureTagGroup, checked: bool) -> None:
        """Set the group checkbox and force every direct member to the same state."""
        group.checked = checked
        for entry in group.members:
            entry.selected = checked

    @staticmethod
    def toggle_tag(group: FeatureTagGroup, raw: str, checked: bool) -> bool:
        """
        Set the selection of the member(s) with the given raw tag.

        The group checkbox is left as is.

        Returns:
            True if a member matched
        """
        found = False
        for entry in group.members:
            if entry.tag.raw == raw:
                entry.selected = checked
                found = True
        return found

    @staticmethod
    def find_group(groups: list[FeatureTagGroup], ticket_id: str) -> FeatureTagGroup | None:
        return next((g for g in groups if g.ticket_id == ticket_id), None)

    @staticmethod
    def collect_selected(groups: Iterable[FeatureTagGroup]) -> list[FeatureTag]:
        """Selected members in group-then-member order."""
        return [
            entry.tag
            for group in groups
            for entry in group.members
            if entry.selected
        ]


class TagSelectionSet:
    """Ordered set of tags chosen for a bulk operation such as deletion."""

    def __init__(self, tags: Iterable[FeatureTag] = ()):
        self._tags: dict[str, FeatureTag] = {}
        for tag in tags:
            self._tags.setdefault(tag.raw, tag)

    @classmethod
    def from_groups(cls, groups: Iterable[FeatureTagGroup]) -> "TagSelectionSet":
        return cls(FeatureTagIndex.collect_selected(groups))

    def raw_tags(self) -> list[str]:
        """Raw tag names as expected by the repository."""
        return list(self._tags)

    def __iter__(self) -> Iterator[FeatureTag]:
        return iter(self._tags.values())

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, FeatureTag):
            return item.raw in self._tags
        return item in self._tags

    def __bool__(self) -> bool:
        return bool(self._tags)
