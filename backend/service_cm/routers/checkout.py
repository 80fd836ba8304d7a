"""
Checkout and revert endpoints.

Each request carries the user actions of one dialog session; the
session is rebuilt from them, so no state is kept between requests.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from service_cm.clients.tag_repository import TagRepository
from service_cm.dependencies import get_codec, get_tag_repository
from service_cm.errors import InvalidVersionFormatError
from service_cm.schemas.api import (
    CheckoutDecisionRequest,
    CheckoutDecisionResponse,
    ExplicitVersionAction,
    RejectedAction,
    RevertRequest,
    RevertResponse,
)
from service_cm.schemas.checkout import ExplicitVersionEntered, FeatureTagSelected
from service_cm.schemas.feature_tag import NonStandardTag
from service_cm.services.revert import (
    RevertSelection,
    release_tag_prefix,
    service_release_tags,
)
from service_cm.services.tag_codec import FeatureTagCodec
from service_cm.services.version_policy import CheckoutSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.post("/decision", response_model=CheckoutDecisionResponse)
async def checkout_decision(
    request: CheckoutDecisionRequest,
    codec: Annotated[FeatureTagCodec, Depends(get_codec)],
) -> CheckoutDecisionResponse:
    """
    Decide the version of a checkout from the actions taken by the user.

    A malformed version entry is rejected and leaves the previous
    decision in place; a non-standard feature tag fails the request.
    """
    session = CheckoutSession(
        (request.current_version.major, request.current_version.minor),
        ticket_id=request.ticket_id,
        project_order_id=request.project_order_id,
        create_new_feature_tag_version=request.create_new_feature_tag_version,
    )
    proposed = session.policy.current_decision().version

    rejected = []
    for position, action in enumerate(request.actions):
        if isinstance(action, ExplicitVersionAction):
            try:
                session.policy.apply(ExplicitVersionEntered(text=action.text))
            except InvalidVersionFormatError as e:
                rejected.append(RejectedAction(index=position, error=str(e)))
            continue

        tag = codec.decode(action.tag)
        if isinstance(tag, NonStandardTag):
            raise HTTPException(
                status_code=422,
                detail=f"Non-standard feature tag '{tag.raw}': {tag.reason}",
            )
        session.policy.apply(FeatureTagSelected(tag=tag))

    decision = session.confirm(request.pending_version_text)
    return CheckoutDecisionResponse(
        decision=decision,
        proposed=proposed,
        ready=session.ready,
        create_new_feature_tag_version=session.create_new_feature_tag_version,
        rejected=rejected,
    )


@router.post("/revert", response_model=RevertResponse)
async def revert_version(
    request: RevertRequest,
    repository: Annotated[TagRepository, Depends(get_tag_repository)],
) -> RevertResponse:
    """
    Pick the release tag to revert to and the version it is assigned.

    Without an explicit tag the first release tag is used; an explicit
    version overrides the one encoded in the tag.
    """
    prefix = release_tag_prefix(request.business_function, request.container, request.service_name)
    release_tags = [
        raw
        for raw, _ in service_release_tags(
            await repository.list_tags(prefix),
            request.business_function,
            request.container,
            request.service_name,
        )
    ]

    selection = RevertSelection(release_tags)
    if request.tag is not None:
        try:
            selection.select(request.tag)
        except LookupError as e:
            raise HTTPException(status_code=404, detail=str(e))
    if request.version is not None:
        selection.assign(request.version.major, request.version.minor, request.version.build)

    logger.info(f"Revert to '{selection.selected_tag}' as {selection.assigned_version}")
    return RevertResponse(
        tag=selection.selected_tag,
        version=selection.assigned_version,
        available=selection.release_tags,
    )
