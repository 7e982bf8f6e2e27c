import os

# Settings are read at import time; keep the app off any local database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from curricula.config import settings
from curricula.database import configure_sqlite, get_db
from curricula.init_db import seed_reference_data
from curricula.main import app
from curricula.models import Base, Category, Creator, Resource, ResourceType, Tag
from curricula.schemas import SubmissionCreate
from curricula.services.auth import create_user
from curricula.services.submissions import create_pending_submission

SUBMISSION_TOKEN = "test-submission-token-0123456789abcdef"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


class FakeLLM:
    """Stands in for OpenAIChat: records calls and returns a canned completion."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def chat(self, *, model, messages, temperature=0.2):
        self.calls.append({"model": model, "messages": list(messages), "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    """Default categories and tags, as created by init_db."""
    seed_reference_data(db)
    return db


@pytest.fixture
def category(seeded):
    return seeded.query(Category).filter(Category.slug == "productivity").one()


@pytest.fixture
def design(seeded):
    return seeded.query(Category).filter(Category.slug == "design").one()


@pytest.fixture
def tags(seeded):
    return seeded.query(Tag).order_by(Tag.id).all()


@pytest.fixture
def make_creator(db):
    def _make(name="Cal Newport", slug="cal-newport", **kwargs):
        creator = Creator(name=name, slug=slug, **kwargs)
        db.add(creator)
        db.commit()
        return creator
    return _make


@pytest.fixture
def make_resource(db, make_creator):
    """Published resources by one creator, aged relative to a fixed time."""
    creator = make_creator()

    def _make(slug, category, age_days=0, featured=False, tags=()):
        resource = Resource(
            title=slug.replace("-", " ").title(),
            slug=slug,
            url=f"https://example.com/{slug}",
            type=ResourceType.BOOK,
            creator_id=creator.id,
            category_id=category.id,
            is_featured=featured,
            created_at=BASE_TIME - timedelta(days=age_days),
        )
        resource.tags = list(tags)
        db.add(resource)
        db.commit()
        return resource
    return _make


@pytest.fixture
def make_submission(db):
    def _make(**overrides):
        data = {
            "title": "Deep Work",
            "url": "https://example.com/deep-work",
            "type": "BOOK",
            "creator_name": "Cal Newport",
            "suggested_category": "Productivity",
        }
        data.update(overrides)
        return create_pending_submission(db, SubmissionCreate(**data))
    return _make


@pytest.fixture
def submission_token(monkeypatch):
    monkeypatch.setattr(settings, "SUBMISSION_API_TOKEN", SUBMISSION_TOKEN)
    return SUBMISSION_TOKEN


@pytest.fixture
def client(db):
    # The app and the test share one session so both see the same data
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db):
    return create_user(db, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, name="Admin", role="admin")


@pytest.fixture
def admin_client(client, admin_user):
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
