"""
Annotation Validator.

Gates commit-like operations on a minimum annotation length. The change
and commit operations use different minimums, so the threshold is always
passed in or taken from the settings of the operation.
"""

import logging

from service_cm.errors import AnnotationTooShortError
from service_cm.schemas.decision import (
    AnnotationCheck,
    AnnotationKind,
    CommitAnnotation,
    CommitRequest,
)

logger = logging.getLogger(__name__)


def validate(text: str, min_length: int) -> AnnotationCheck:
    """
    Check an annotation against a minimum length.

    Args:
        text: Annotation entered by the user
        min_length: Minimum number of characters

    Returns:
        AnnotationCheck with ok=False when the text is too short
    """
    actual = len(text or "")
    if actual >= min_length:
        return AnnotationCheck(ok=True, required=min_length, actual=actual)
    return AnnotationCheck(
        ok=False,
        required=min_length,
        actual=actual,
        message=f"Please enter at least a {min_length}-character description!",
    )


def should_offer_release(auto_release_requested: bool) -> bool:
    return bool(auto_release_requested)


class AnnotationValidator:
    """Validator bound to the configured per-operation thresholds."""

    def __init__(self, change_min_length: int = 4, commit_min_length: int = 8):
        self.thresholds: dict[AnnotationKind, int] = {
            AnnotationKind.CHANGE: change_min_length,
            AnnotationKind.COMMIT: commit_min_length,
        }

    def min_length(self, kind: AnnotationKind) -> int:
        return self.thresholds[kind]

    def validate(self, text: str, min_length: int) -> AnnotationCheck:
        return validate(text, min_length)

    def validate_change(self, text: str) -> AnnotationCheck:
        return validate(text, self.thresholds[AnnotationKind.CHANGE])

    def validate_commit(self, text: str) -> AnnotationCheck:
        return validate(text, self.thresholds[AnnotationKind.COMMIT])

    def should_offer_release(self, auto_release_requested: bool) -> bool:
        return should_offer_release(auto_release_requested)

    def build_commit_request(
        self, annotation: CommitAnnotation, kind: AnnotationKind
    ) -> CommitRequest:
        """
        Turn a valid annotation into a request for the repository.

        Raises:
            AnnotationTooShortError: If the annotation is below the threshold of kind
        """
        check = validate(annotation.text, self.thresholds[kind])
        if not check.ok:
            logger.info(f"Blocked {kind.value}: annotation has {check.actual} characters")
            raise AnnotationTooShortError(check.required, check.actual)
        return CommitRequest(
            kind=kind,
            annotation=annotation.text,
            release_requested=should_offer_release(annotation.release_requested),
        )
