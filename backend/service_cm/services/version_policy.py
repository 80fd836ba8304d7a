"""
Service Version Policy.

Decides which version a checkout uses: an explicitly typed new version,
or the version of an existing feature tag. The two are alternatives and
the last action wins.

State transitions are pure functions over PolicyState; the classes below
only hold the current state of a single checkout session.
"""

import logging

from service_cm.errors import InvalidVersionFormatError, PolicyStateError
from service_cm.schemas.checkout import (
    ExplicitVersionEntered,
    FeatureTagSelected,
    PolicyEvent,
    PolicyMode,
    PolicyState,
)
from service_cm.schemas.decision import VersionDecision, VersionSource
from service_cm.schemas.feature_tag import FeatureTag
from service_cm.schemas.version import VersionTriple
from service_cm.utils.tag_grammar import MAJOR_MINOR_PATTERN

logger = logging.getLogger(__name__)


def parse_major_minor(text: str) -> tuple[int, int]:
    """
    Parse a user-typed '<major>.<minor>' version.

    Raises:
        InvalidVersionFormatError: If the text is not two non-negative integers
    """
    match = MAJOR_MINOR_PATTERN.fullmatch(text or "")
    if match is None:
        raise InvalidVersionFormatError(text)
    return int(match.group(1)), int(match.group(2))


def initial_state(major: int, minor: int) -> PolicyState:
    """Propose the next minor version of the current one, build reset to zero."""
    if major < 0 or minor < 0:
        raise InvalidVersionFormatError(f"{major}.{minor}")
    proposed = VersionTriple(major=major, minor=minor).next_minor(build=0)
    return PolicyState(mode=PolicyMode.USING_EXPLICIT_VERSION, version=proposed)


def explicit_version(major: int, minor: int) -> PolicyState:
    if major < 0 or minor < 0:
        raise InvalidVersionFormatError(f"{major}.{minor}")
    return PolicyState(
        mode=PolicyMode.USING_EXPLICIT_VERSION,
        version=VersionTriple(major=major, minor=minor),
    )


def feature_tag(tag: FeatureTag) -> PolicyState:
    return PolicyState(mode=PolicyMode.USING_FEATURE_TAG, version=tag.version, tag=tag)


def reduce(state: PolicyState, event: PolicyEvent) -> PolicyState:
    """
    Apply a user event to the policy state.

    Malformed version text raises InvalidVersionFormatError; since states
    are immutable the caller's previous state stays authoritative.
    """
    if isinstance(event, ExplicitVersionEntered):
        major, minor = parse_major_minor(event.text)
        return explicit_version(major, minor)
    if isinstance(event, FeatureTagSelected):
        return feature_tag(event.tag)
    raise TypeError(f"Unsupported policy event: {type(event).__name__}")


def decision_for(state: PolicyState) -> VersionDecision:
    if state.mode == PolicyMode.UNINITIALIZED or state.version is None:
        raise PolicyStateError("Version policy has not been initialized")
    if state.mode == PolicyMode.USING_FEATURE_TAG:
        return VersionDecision(
            source=VersionSource.FEATURE_TAG, version=state.version, tag_ref=state.tag
        )
    return VersionDecision(source=VersionSource.EXPLICIT_VERSION, version=state.version)


class ServiceVersionPolicy:
    """
    Version policy of one checkout session.

    Usage:
        policy = ServiceVersionPolicy()
        policy.initialize((1, 3))          # proposes 1.4
        policy.select_feature_tag(tag)     # tag version wins
        policy.set_explicit_version(2, 5)  # explicit version wins, tag cleared
        decision = policy.current_decision()
    """

    def __init__(self, state: PolicyState | None = None):
        self.state = state or PolicyState()

    @property
    def mode(self) -> PolicyMode:
        return self.state.mode

    def initialize(self, current_version: tuple[int, int]) -> VersionTriple:
        major, minor = current_version
        self.state = initial_state(major, minor)
        logger.debug(f"Proposed version {self.state.version} for current {major}.{minor}")
        return self.state.version

    def set_explicit_version(self, major: int, minor: int) -> None:
        self.state = explicit_version(major, minor)
        logger.debug(f"Using explicit version {self.state.version}")

    def set_explicit_version_text(self, text: str) -> None:
        self.apply(ExplicitVersionEntered(text=text))

    def select_feature_tag(self, tag: FeatureTag) -> None:
        self.apply(FeatureTagSelected(tag=tag))

    def apply(self, event: PolicyEvent) -> None:
        self.state = reduce(self.state, event)
        logger.debug(f"Policy is now {self.state.mode.value} at {self.state.version}")

    def current_decision(self) -> VersionDecision:
        return decision_for(self.state)


class CheckoutSession:
    """
    Checkout of a service: version policy plus the ticket it is done for.

    The checkout can be confirmed once both a ticket id and a project
    order id are present.
    """

    def __init__(
        self,
        current_version: tuple[int, int],
        ticket_id: str = "",
        project_order_id: str = "",
        create_new_feature_tag_version: bool = False,
    ):
        self.policy = ServiceVersionPolicy()
        self.policy.initialize(current_version)
        self.ticket_id = ticket_id
        self.project_order_id = project_order_id
        self.create_new_feature_tag_version = create_new_feature_tag_version

    @property
    def ready(self) -> bool:
        return bool(self.ticket_id) and bool(self.project_order_id)

    def confirm(self, pending_version_text: str | None = None) -> VersionDecision:
        """
        Finish the session and return the final decision.

        A version that was typed but not yet applied takes effect when it
        parses and differs from the active explicit version; unparseable
        pending text is ignored.
        """
        if pending_version_text:
            try:
                major, minor = parse_major_minor(pending_version_text)
            except InvalidVersionFormatError:
                logger.debug(f"Ignoring pending version text '{pending_version_text}'")
            else:
                state = self.policy.state
                if (
                    state.mode != PolicyMode.USING_EXPLICIT_VERSION
                    or state.version is None
                    or (state.version.major, state.version.minor) != (major, minor)
                ):
                    self.policy.set_explicit_version(major, minor)

        decision = self.policy.current_decision()
        logger.info(
            f"Checkout for ticket '{self.ticket_id}' uses {decision.source.value} "
            f"{decision.version}"
        )
        return decision
