"""
Tag listing, creation and cleanup endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from service_cm.clients.tag_repository import TagRepository
from service_cm.config import get_settings
from service_cm.dependencies import get_codec, get_index, get_tag_repository
from service_cm.schemas.api import (
    CreateFeatureTagRequest,
    CreateFeatureTagResponse,
    DeleteTagsRequest,
    DeleteTagsResponse,
    FeatureTagListResponse,
    ReleaseTagInfo,
    ReleaseTagListResponse,
    SelectionEvent,
)
from service_cm.schemas.feature_tag import FeatureTagGroup
from service_cm.services.revert import release_tag_prefix, service_release_tags
from service_cm.services.tag_codec import FeatureTagCodec
from service_cm.services.tag_index import FeatureTagIndex, TagSelectionSet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tags", tags=["tags"])


def _service_filter(
    business_function: str | None,
    container: str | None,
    service_name: str | None,
) -> tuple[str, str, str] | None:
    given = [business_function, container, service_name]
    if not any(given):
        return None
    if not all(given):
        raise HTTPException(
            status_code=400,
            detail="business_function, container and service_name must be given together",
        )
    return business_function, container, service_name


async def _load_groups(
    repository: TagRepository,
    index: FeatureTagIndex,
    service: tuple[str, str, str] | None,
) -> list[FeatureTagGroup]:
    prefix = f"{get_settings().feature_tag_prefix}/"
    raw_tags = await repository.list_tags(prefix)
    return index.build(raw_tags, service=service)


def _apply_selection(groups: list[FeatureTagGroup], event: SelectionEvent) -> None:
    group = FeatureTagIndex.find_group(groups, event.ticket_id)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Unknown ticket '{event.ticket_id}'")
    if event.kind == "group":
        FeatureTagIndex.toggle_group(group, event.checked)
    elif event.raw is None or not FeatureTagIndex.toggle_tag(group, event.raw, event.checked):
        raise HTTPException(
            status_code=404,
            detail=f"Unknown tag '{event.raw}' in ticket '{event.ticket_id}'",
        )


@router.get("/feature", response_model=FeatureTagListResponse)
async def list_feature_tags(
    repository: Annotated[TagRepository, Depends(get_tag_repository)],
    index: Annotated[FeatureTagIndex, Depends(get_index)],
    business_function: Annotated[str | None, Query()] = None,
    container: Annotated[str | None, Query()] = None,
    service_name: Annotated[str | None, Query()] = None,
) -> FeatureTagListResponse:
    """
    List feature tags grouped by ticket.

    Non-standard tags are reported in 'skipped' and otherwise ignored.
    """
    service = _service_filter(business_function, container, service_name)
    raw_tags = await repository.list_tags(f"{get_settings().feature_tag_prefix}/")
    decoded, skipped = index.codec.decode_all(raw_tags)
    groups = index.group(decoded, service=service)
    return FeatureTagListResponse(
        groups=groups,
        skipped=skipped,
        total=sum(len(g.members) for g in groups),
    )


@router.post("/feature", response_model=CreateFeatureTagResponse, status_code=201)
async def create_feature_tag(
    request: CreateFeatureTagRequest,
    repository: Annotated[TagRepository, Depends(get_tag_repository)],
    codec: Annotated[FeatureTagCodec, Depends(get_codec)],
) -> CreateFeatureTagResponse:
    """Encode a new feature tag and create it on the given commit."""
    tag = codec.create(
        request.ticket_id,
        request.business_function,
        request.container,
        request.service_name,
        request.version,
    )
    await repository.create_tag(tag.raw, request.sha)
    return CreateFeatureTagResponse(tag=tag)


@router.post("/feature/delete", response_model=DeleteTagsResponse)
async def delete_feature_tags(
    request: DeleteTagsRequest,
    repository: Annotated[TagRepository, Depends(get_tag_repository)],
    index: Annotated[FeatureTagIndex, Depends(get_index)],
) -> DeleteTagsResponse:
    """
    Replay checkbox events on the current listing and delete the selection.

    Events are applied in order; a group event overrides earlier
    individual choices of its members.
    """
    service = _service_filter(
        request.business_function, request.container, request.service_name
    )
    groups = await _load_groups(repository, index, service)
    for event in request.events:
        _apply_selection(groups, event)

    selection = TagSelectionSet.from_groups(groups)
    if request.dry_run or not selection:
        return DeleteTagsResponse(selected=selection.raw_tags())

    deleted = await repository.delete_tags(selection.raw_tags())
    return DeleteTagsResponse(selected=selection.raw_tags(), deleted=deleted)


@router.get("/release", response_model=ReleaseTagListResponse)
async def list_release_tags(
    repository: Annotated[TagRepository, Depends(get_tag_repository)],
    business_function: str,
    container: str,
    service_name: str,
) -> ReleaseTagListResponse:
    """List release tags of a service with the versions they can be reverted to."""
    prefix = release_tag_prefix(business_function, container, service_name)
    raw_tags = await repository.list_tags(prefix)
    tags = [
        ReleaseTagInfo(tag=raw, version=version)
        for raw, version in service_release_tags(
            raw_tags, business_function, container, service_name
        )
    ]
    return ReleaseTagListResponse(tags=tags, total=len(tags))
