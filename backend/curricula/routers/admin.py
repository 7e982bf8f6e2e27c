"""
Admin back-office actions: review the queue, discover and extract candidates.

Every action catches failures at its boundary and answers with
``{"success": false, "error": "..."}`` so the admin UI can show them inline.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from curricula import exceptions
from curricula.agents import (
    DiscoveredResource, DiscoveryService, ExtractedCandidate, ExtractionService, OpenAIChat
)
from curricula.config import settings
from curricula.database import get_db
from curricula.middleware.auth import RequestContext, require_admin
from curricula.schemas import (
    ActionResult, ApprovalRequest, ApprovalResult, CamelModel, CategoryResponse, CreatorResponse,
    QueueResult, RejectionRequest, SubmissionCreate, SubmissionMetadata, SubmissionResponse, TagResponse
)
from curricula.services import queries
from curricula.services.approval import approve_submission, reject_submission
from curricula.services.page_fetch import PageFetcher
from curricula.services.submissions import (
    SOURCE_DISCOVER_UI, SOURCE_EXTRACT_UI, create_pending_submission, list_pending_submissions,
    suggested_category_slug,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# Request/response models for the discovery tools
class DiscoverRequest(CamelModel):
    topic: str = Field(..., min_length=1, max_length=200)


class DiscoverResult(ActionResult):
    resources: Optional[List[DiscoveredResource]] = None


class QueueDiscoveredRequest(DiscoveredResource):
    discovery_topic: str


class ExtractRequest(CamelModel):
    url: str


class ExtractResult(ActionResult):
    resource: Optional[ExtractedCandidate] = None


# Service dependencies (overridden in tests)
def get_discovery_service() -> DiscoveryService:
    llm = OpenAIChat(
        api_key=settings.PERPLEXITY_API_KEY,
        base_url=settings.PERPLEXITY_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    return DiscoveryService(llm=llm, model=settings.DISCOVERY_MODEL)


def get_extraction_service() -> ExtractionService:
    llm = OpenAIChat(api_key=settings.OPENAI_API_KEY, timeout=settings.HTTP_TIMEOUT_SECONDS)
    return ExtractionService(llm=llm, model=settings.EXTRACTION_MODEL)


def get_page_fetcher() -> PageFetcher:
    return PageFetcher()


def _failure(result_cls, error: Exception, action: str):
    if isinstance(error, exceptions.CurriculaError):
        logger.warning(f"{action} failed: {error}")
        return result_cls(success=False, error=str(error))
    logger.error(f"{action} failed unexpectedly: {str(error)}", exc_info=True)
    return result_cls(success=False, error=f"Failed to {action.lower()}")


# ============================================================================
# REVIEW QUEUE
# ============================================================================

@router.get("/submissions", response_model=List[SubmissionResponse])
async def pending_submissions(
    db: Session = Depends(get_db),
    context: RequestContext = Depends(require_admin)
):
    """
    Pending submissions, newest first, with the preselected category slug.
    """
    results = []
    for submission in list_pending_submissions(db):
        item = SubmissionResponse.model_validate(submission)
        item.suggested_category_slug = suggested_category_slug(submission.suggested_category)
        results.append(item)
    return results

@router.get("/creators", response_model=List[CreatorResponse])
async def all_creators(db: Session = Depends(get_db), context: RequestContext = Depends(require_admin)):
    return queries.list_creators(db)

@router.get("/categories", response_model=List[CategoryResponse])
async def all_categories(db: Session = Depends(get_db), context: RequestContext = Depends(require_admin)):
    return queries.list_categories(db)

@router.get("/tags", response_model=List[TagResponse])
async def all_tags(db: Session = Depends(get_db), context: RequestContext = Depends(require_admin)):
    return queries.list_tags(db)

@router.post("/submissions/{submission_id}/approve", response_model=ApprovalResult)
async def approve(
    submission_id: int,
    request: ApprovalRequest,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(require_admin)
):
    """
    Publish a pending submission as a resource.
    """
    try:
        outcome = approve_submission(db, submission_id, request)
    except Exception as e:
        return _failure(ApprovalResult, e, "Approve submission")

    logger.info(f"{context.user.email} approved submission {submission_id}")
    return ApprovalResult(success=True, resource_id=outcome.resource_id, resource_slug=outcome.resource_slug)

@router.post("/submissions/{submission_id}/reject", response_model=ActionResult)
async def reject(
    submission_id: int,
    request: Optional[RejectionRequest] = None,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(require_admin)
):
    """
    Reject a pending submission with optional review notes.
    """
    notes = request.notes if request else None
    try:
        reject_submission(db, submission_id, notes)
    except Exception as e:
        return _failure(ActionResult, e, "Reject submission")

    logger.info(f"{context.user.email} rejected submission {submission_id}")
    return ActionResult(success=True)

# ============================================================================
# DISCOVERY TOOLS
# ============================================================================

@router.post("/discover", response_model=DiscoverResult)
async def discover(
    request: DiscoverRequest,
    service: DiscoveryService = Depends(get_discovery_service),
    context: RequestContext = Depends(require_admin)
):
    """
    Ask the discovery agent for resources on a topic.
    """
    try:
        resources = service.run(request.topic)
    except Exception as e:
        return _failure(DiscoverResult, e, "Discover resources")
    return DiscoverResult(success=True, resources=resources)

@router.post("/discover/queue", response_model=QueueResult)
async def queue_discovered(
    request: QueueDiscoveredRequest,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(require_admin)
):
    """
    Add a discovered resource to the review queue.
    """
    try:
        data = SubmissionCreate(
            **request.model_dump(exclude={"discovery_topic"}),
            metadata=SubmissionMetadata(
                discovery_topic=request.discovery_topic,
                source_agent=SOURCE_DISCOVER_UI,
            ),
        )
        submission = create_pending_submission(db, data)
    except Exception as e:
        return _failure(QueueResult, e, "Add to queue")
    return QueueResult(success=True, id=submission.id)

@router.post("/extract", response_model=ExtractResult)
async def extract(
    request: ExtractRequest,
    service: ExtractionService = Depends(get_extraction_service),
    fetcher: PageFetcher = Depends(get_page_fetcher),
    context: RequestContext = Depends(require_admin)
):
    """
    Fetch a page and extract resource metadata from it.
    """
    try:
        page = await fetcher.fetch(request.url)
        candidate = service.run(request.url, page.markdown, image_url=page.image_url)
    except Exception as e:
        return _failure(ExtractResult, e, "Extract from URL")
    return ExtractResult(success=True, resource=candidate)

@router.post("/extract/queue", response_model=QueueResult)
async def queue_extracted(
    request: ExtractedCandidate,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(require_admin)
):
    """
    Add an extracted resource to the review queue.
    """
    try:
        data = SubmissionCreate(
            **request.model_dump(),
            metadata=SubmissionMetadata(source_agent=SOURCE_EXTRACT_UI),
        )
        submission = create_pending_submission(db, data)
    except Exception as e:
        return _failure(QueueResult, e, "Add to queue")
    return QueueResult(success=True, id=submission.id)
