"""
Pending submission queue: intake from agents and the admin discovery tools.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from curricula.models import PendingSubmission, SubmissionStatus
from curricula.schemas import SubmissionCreate
from curricula.services.slugs import slugify

logger = logging.getLogger(__name__)

# Category names the agents are asked to choose from, mapped to seeded slugs
CATEGORY_SLUGS: Dict[str, str] = {
    "Productivity": "productivity",
    "Software Development": "software-development",
    "Wellness": "wellness",
    "Business": "business",
    "Finance": "finance",
    "Design": "design",
}

SOURCE_DISCOVER_UI = "admin-discover-ui"
SOURCE_EXTRACT_UI = "admin-extract-ui"


def suggested_category_slug(name: Optional[str]) -> Optional[str]:
    """Map a free-text suggested category to the slug the approval form preselects."""
    if not name:
        return None
    return CATEGORY_SLUGS.get(name.strip()) or slugify(name) or None


def create_pending_submission(db: Session, data: SubmissionCreate) -> PendingSubmission:
    """Insert a submission into the review queue with status pending."""
    submission = PendingSubmission(
        title=data.title,
        description=data.description,
        url=data.url,
        type=data.type,
        price=data.price,
        image_url=data.image_url,
        creator_name=data.creator_name,
        creator_url=data.creator_url,
        suggested_category=data.suggested_category,
        suggested_tags=list(data.suggested_tags),
        meta=data.metadata.to_json() if data.metadata else None,
        status=SubmissionStatus.PENDING,
    )
    try:
        db.add(submission)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(submission)

    source = (submission.meta or {}).get("sourceAgent", "unknown")
    logger.info(f"Queued submission {submission.id} '{submission.title}' from {source}")
    return submission


def list_pending_submissions(db: Session) -> List[PendingSubmission]:
    return (
        db.query(PendingSubmission)
        .filter(PendingSubmission.status == SubmissionStatus.PENDING)
        .order_by(PendingSubmission.created_at.desc(), PendingSubmission.id.desc())
        .all()
    )
