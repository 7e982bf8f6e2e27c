import pytest

from curricula.config import settings
from curricula.models import PendingSubmission, SubmissionStatus
from curricula.routers import submissions as submissions_router

VALID_SUBMISSION = {
    "title": "Deep Work",
    "description": "Rules for focused success in a distracted world.",
    "url": "https://example.com/deep-work",
    "type": "BOOK",
    "price": "$18",
    "creatorName": "Cal Newport",
    "creatorUrl": "https://calnewport.com",
    "suggestedCategory": "Productivity",
    "suggestedTags": ["focus", "deep work"],
    "metadata": {"sourceAgent": "research-bot", "confidenceScore": 0.92, "crawlId": "run-7"},
}


def post(client, body, token=None, **kwargs):
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return client.post("/api/submissions", json=body, headers=headers, **kwargs)


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Token abc"},
    {"Authorization": "Bearer wrong-token"},
    {"Authorization": "Bearer"},
])
def test_rejects_missing_or_wrong_token(client, submission_token, headers, db):
    response = client.post("/api/submissions", json=VALID_SUBMISSION, headers=headers)

    assert response.status_code == 401
    assert "error" in response.json()
    assert db.query(PendingSubmission).count() == 0


def test_rejects_everything_when_token_not_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "SUBMISSION_API_TOKEN", "")

    response = post(client, VALID_SUBMISSION, token="anything")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token"}


def test_rejects_invalid_json(client, submission_token):
    response = client.post(
        "/api/submissions",
        content=b"{not json",
        headers={"Authorization": f"Bearer {submission_token}", "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON in request body"}


def test_reports_field_errors(client, submission_token, db):
    body = {"description": "missing everything", "url": "not a url", "type": "VIDEO_GAME"}

    response = post(client, body, token=submission_token)

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "Validation failed"
    for field in ("title", "url", "type", "creatorName", "suggestedCategory"):
        assert field in payload["details"]
    assert payload["details"]["url"] == ["Invalid URL"]
    assert db.query(PendingSubmission).count() == 0


def test_reports_nested_metadata_errors(client, submission_token):
    body = dict(VALID_SUBMISSION, metadata={"confidenceScore": 3})

    response = post(client, body, token=submission_token)

    assert response.status_code == 400
    assert "metadata.confidenceScore" in response.json()["details"]


def test_queues_valid_submission(client, submission_token, db):
    response = post(client, VALID_SUBMISSION, token=submission_token)

    assert response.status_code == 201
    payload = response.json()
    assert payload["message"] == "Submission received"

    submission = db.get(PendingSubmission, payload["id"])
    assert submission.title == "Deep Work"
    assert submission.url == "https://example.com/deep-work"
    assert submission.creator_name == "Cal Newport"
    assert submission.suggested_tags == ["focus", "deep work"]
    assert submission.status == SubmissionStatus.PENDING
    assert submission.reviewed_at is None
    assert submission.meta == {"sourceAgent": "research-bot", "confidenceScore": 0.92, "crawlId": "run-7"}


def test_blank_optional_urls_are_stored_as_null(client, submission_token, db):
    body = dict(VALID_SUBMISSION, imageUrl="", creatorUrl="   ")

    response = post(client, body, token=submission_token)

    assert response.status_code == 201
    submission = db.get(PendingSubmission, response.json()["id"])
    assert submission.image_url is None
    assert submission.creator_url is None


def test_minimal_submission(client, submission_token, db):
    body = {
        "title": "Huberman Lab",
        "url": "https://hubermanlab.com",
        "type": "PODCAST",
        "creatorName": "Andrew Huberman",
        "suggestedCategory": "Wellness",
    }

    response = post(client, body, token=submission_token)

    assert response.status_code == 201
    submission = db.get(PendingSubmission, response.json()["id"])
    assert submission.suggested_tags == []
    assert submission.meta is None


def test_save_failure_returns_500(client, submission_token, monkeypatch):
    def broken(db, data):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(submissions_router, "create_pending_submission", broken)

    response = post(client, VALID_SUBMISSION, token=submission_token)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to save submission"}
