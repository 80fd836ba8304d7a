"""
Pydantic models for feature tags and their ticket grouping.
"""

from pydantic import BaseModel, Field

from service_cm.schemas.version import VersionTriple


class FeatureTag(BaseModel):
    """
    A repository tag that follows the feature tag grammar.

    The raw string is kept so that selections can be mapped back to the
    exact tag name known to the repository.
    """

    ticket_id: str
    business_function: str
    container: str
    service_name: str
    version: VersionTriple
    raw: str

    model_config = {"frozen": True}

    @property
    def service_path(self) -> str:
        """'<business-function>.<container>/<service>' as used for tag queries."""
        return f"{self.business_function}.{self.container}/{self.service_name}"

    @property
    def leaf_label(self) -> str:
        """Label of the leaf node below the ticket: '<service>_V..P..B..'."""
        return f"{self.service_name}_{self.version.format()}"

    def matches_service(
        self, business_function: str, container: str, service_name: str
    ) -> bool:
        return (
            self.business_function == business_function
            and self.container == container
            and self.service_name == service_name
        )


class NonStandardTag(BaseModel):
    """A tag that does not follow the grammar; skipped, never raised."""

    raw: str
    reason: str

    model_config = {"frozen": True}


class FeatureTagEntry(BaseModel):
    """Leaf of a ticket group with its individual selection state."""

    tag: FeatureTag
    selected: bool = False


class FeatureTagGroup(BaseModel):
    """All feature tags of a single ticket, in first-seen order."""

    ticket_id: str
    checked: bool = False
    members: list[FeatureTagEntry] = Field(default_factory=list)

    @property
    def tags(self) -> list[FeatureTag]:
        return [entry.tag for entry in self.members]
