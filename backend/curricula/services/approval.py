"""
Review workflow for pending submissions.

Approving resolves a submission's free-text creator and category into real
rows and publishes it as a Resource. The whole approval runs in one
transaction: if any step fails nothing is written, including a newly created
creator. Rejecting only records the decision.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from curricula import exceptions
from curricula.models import Creator, PendingSubmission, Resource, SubmissionStatus, resource_tags
from curricula.schemas import ApprovalRequest
from curricula.services.queries import get_category_by_slug
from curricula.services.slugs import insert_with_unique_slug

logger = logging.getLogger(__name__)

DEFAULT_PRICE = "Unknown"


@dataclass(frozen=True)
class ApprovalOutcome:
    resource_id: int
    resource_slug: str


def _load_pending(db: Session, submission_id: int) -> PendingSubmission:
    submission = db.get(PendingSubmission, submission_id)
    if submission is None:
        raise exceptions.NotFoundError("Submission not found")
    if submission.status != SubmissionStatus.PENDING:
        raise exceptions.InvalidStateError("Submission is not pending")
    return submission


def _has_creator_info(request: ApprovalRequest) -> bool:
    if request.creator_id is not None:
        return True
    return request.new_creator is not None and bool(request.new_creator.name.strip())


def _resolve_creator(db: Session, request: ApprovalRequest) -> int:
    if request.creator_id is not None:
        # Admin override: trusted as-is, the foreign key catches bad ids
        return request.creator_id

    new_creator = request.new_creator
    creator = Creator(
        name=new_creator.name,
        website_url=new_creator.website_url or None,
        bio=new_creator.bio or None,
    )
    slug = insert_with_unique_slug(db, creator, new_creator.name, fallback="creator")
    logger.info(f"Created creator '{creator.name}' ({slug})")
    return creator.id


def _mark_reviewed(db: Session, submission_id: int, **values) -> None:
    # Compare-and-set so two reviewers cannot both move the same submission
    now = datetime.utcnow()
    updated = (
        db.query(PendingSubmission)
        .filter(
            PendingSubmission.id == submission_id,
            PendingSubmission.status == SubmissionStatus.PENDING,
        )
        .update({**values, "reviewed_at": now, "updated_at": now}, synchronize_session="fetch")
    )
    if updated != 1:
        raise exceptions.InvalidStateError("Submission is not pending")


def approve_submission(db: Session, submission_id: int, request: ApprovalRequest) -> ApprovalOutcome:
    """
    Publish a pending submission as a resource.

    Raises:
        NotFoundError: the submission or the category does not exist
        InvalidStateError: the submission was already reviewed
        ValidationError: no creator (creator_id or a named new_creator) or no category_slug
        ConflictError: a constraint failed (dangling creator/tag id, slug race)
    """
    submission = _load_pending(db, submission_id)

    if not _has_creator_info(request):
        raise exceptions.ValidationError("Creator information required")
    if not request.category_slug:
        raise exceptions.ValidationError("Category required")

    try:
        creator_id = _resolve_creator(db, request)

        category = get_category_by_slug(db, request.category_slug)
        if category is None:
            raise exceptions.NotFoundError(f"Category not found: {request.category_slug}")

        title = request.title or submission.title
        if "image_url" in request.model_fields_set:
            image_url = request.image_url
        else:
            image_url = submission.image_url

        resource = Resource(
            title=title,
            description=request.description if request.description is not None else submission.description,
            url=submission.url,
            type=submission.type,
            price=request.price or submission.price or DEFAULT_PRICE,
            image_url=image_url,
            creator_id=creator_id,
            category_id=category.id,
            is_featured=bool(request.is_featured),
            meta=submission.meta,
        )
        resource_slug = insert_with_unique_slug(db, resource, title, fallback="resource")
        resource_id = resource.id

        if request.tag_ids:
            db.execute(
                resource_tags.insert(),
                [{"resource_id": resource_id, "tag_id": tag_id} for tag_id in request.tag_ids],
            )

        _mark_reviewed(db, submission_id, status=SubmissionStatus.APPROVED)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Approval of submission {submission_id} hit a constraint: {e.orig}")
        raise exceptions.ConflictError("Failed to approve submission: conflicting or missing reference") from e
    except Exception:
        db.rollback()
        raise

    logger.info(f"Approved submission {submission_id} as resource {resource_id} ({resource_slug})")
    return ApprovalOutcome(resource_id=resource_id, resource_slug=resource_slug)


def reject_submission(db: Session, submission_id: int, notes: Optional[str] = None) -> PendingSubmission:
    """
    Reject a pending submission, keeping the review notes verbatim.

    Only pending submissions can be rejected, so a submission changes status
    exactly once.
    """
    submission = _load_pending(db, submission_id)
    try:
        _mark_reviewed(db, submission_id, status=SubmissionStatus.REJECTED, review_notes=notes)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    logger.info(f"Rejected submission {submission_id}")
    return submission
