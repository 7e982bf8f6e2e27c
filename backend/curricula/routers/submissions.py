"""
Agent intake endpoint: external agents post candidate resources for review.
"""
import json
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from curricula.database import get_db
from curricula.middleware.auth import check_submission_token
from curricula.schemas import SubmissionCreate
from curricula.services.submissions import create_pending_submission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Flatten pydantic errors into {field: [messages]} keyed by wire name."""
    details: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("_root",)
        field = ".".join(str(part) for part in loc)
        message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        details.setdefault(field, []).append(message)
    return details


@router.post("/submissions", status_code=status.HTTP_201_CREATED)
async def submit_resource(request: Request, db: Session = Depends(get_db)):
    """
    Queue a resource submission for admin review.

    Requires `Authorization: Bearer <SUBMISSION_API_TOKEN>`.
    """
    auth_error = check_submission_token(request.headers.get("Authorization"))
    if auth_error:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": auth_error})

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid JSON in request body"},
        )

    try:
        data = SubmissionCreate.model_validate(body)
    except ValidationError as ve:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation failed", "details": field_errors(ve)},
        )

    try:
        submission = create_pending_submission(db, data)
    except Exception as e:
        logger.error(f"Failed to insert submission: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to save submission"},
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"id": submission.id, "message": "Submission received"},
    )
