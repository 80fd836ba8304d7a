"""
Commit and change annotation endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from service_cm.dependencies import get_annotation_validator
from service_cm.schemas.api import CommitValidationRequest, CommitValidationResponse
from service_cm.schemas.decision import CommitAnnotation
from service_cm.services.annotation import AnnotationValidator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/commit", tags=["commit"])


@router.post("/validate", response_model=CommitValidationResponse)
async def validate_annotation(
    request: CommitValidationRequest,
    validator: Annotated[AnnotationValidator, Depends(get_annotation_validator)],
) -> CommitValidationResponse:
    """
    Validate a change or commit annotation.

    Returns the commit request to hand to the repository when the
    annotation is long enough, otherwise only the failed check.
    """
    check = validator.validate(request.text, validator.min_length(request.kind))
    if not check.ok:
        return CommitValidationResponse(check=check)

    annotation = CommitAnnotation(
        text=request.text, release_requested=request.release_requested
    )
    commit_request = validator.build_commit_request(annotation, request.kind)
    logger.info(
        f"Accepted {request.kind.value} annotation, release={commit_request.release_requested}"
    )
    return CommitValidationResponse(check=check, request=commit_request)
