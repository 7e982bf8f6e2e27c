from pydantic import (
    AfterValidator, AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, HttpUrl, TypeAdapter
)
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime

from curricula.models import ResourceType, SubmissionStatus

_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    # Validate as an http(s) URL but keep the caller's exact string
    try:
        _http_url.validate_python(value)
    except ValueError:
        raise ValueError("Invalid URL")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]
OptionalUrlStr = Annotated[Optional[UrlStr], BeforeValidator(_blank_to_none)]


class CamelModel(BaseModel):
    """Base for API models: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Submission metadata
class SubmissionMetadata(CamelModel):
    """Known agent metadata keys; unknown keys are kept as-is."""
    model_config = ConfigDict(extra="allow")

    discovery_topic: Optional[str] = None
    source_agent: Optional[str] = None
    confidence_score: Optional[float] = Field(None, ge=0, le=1)
    url_verified: Optional[bool] = None
    notes: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Creator Schemas
class CreatorResponse(CamelModel):
    id: int
    name: str
    slug: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    website_url: Optional[str] = None
    twitter_url: Optional[str] = None


class NewCreator(CamelModel):
    name: str = Field(..., max_length=255)
    website_url: OptionalUrlStr = None
    bio: Optional[str] = None


# Category Schemas
class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None


class CategoryWithCount(CategoryResponse):
    resource_count: int = 0


# Tag Schemas
class TagResponse(CamelModel):
    id: int
    name: str
    slug: str


class TagWithCount(TagResponse):
    resource_count: int = 0


# Resource Schemas
class ResourceResponse(CamelModel):
    id: int
    title: str
    slug: str
    description: Optional[str] = None
    url: str
    type: ResourceType
    price: str
    image_url: Optional[str] = None
    is_featured: bool
    metadata: Optional[SubmissionMetadata] = Field(
        None, validation_alias=AliasChoices("meta", "metadata"), serialization_alias="metadata"
    )
    created_at: datetime
    updated_at: datetime
    creator: CreatorResponse
    category: CategoryResponse
    tags: List[TagResponse] = []


class ResourceDetailResponse(CamelModel):
    resource: ResourceResponse
    related: List[ResourceResponse] = []


class CreatorDetailResponse(CamelModel):
    creator: CreatorResponse
    resources: List[ResourceResponse] = []


class HomeResponse(CamelModel):
    categories: List[CategoryWithCount]
    resources: List[ResourceResponse]


class BrowseResponse(HomeResponse):
    tags: List[TagWithCount]


# Submission Schemas
class SubmissionCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    url: UrlStr
    type: ResourceType
    price: Optional[str] = Field(None, max_length=100)
    image_url: OptionalUrlStr = None
    creator_name: str = Field(..., min_length=1, max_length=255)
    creator_url: OptionalUrlStr = None
    suggested_category: str = Field(..., min_length=1, max_length=100)
    suggested_tags: List[str] = []
    metadata: Optional[SubmissionMetadata] = None


class SubmissionResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    url: str
    type: ResourceType
    price: Optional[str] = None
    image_url: Optional[str] = None
    creator_name: str
    creator_url: Optional[str] = None
    suggested_category: str
    suggested_category_slug: Optional[str] = None
    suggested_tags: List[str] = []
    metadata: Optional[SubmissionMetadata] = Field(
        None, validation_alias=AliasChoices("meta", "metadata"), serialization_alias="metadata"
    )
    status: SubmissionStatus
    review_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime


# Review Schemas
class ApprovalRequest(CamelModel):
    # Overrides from the approval form
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[str] = Field(None, max_length=100)
    image_url: OptionalUrlStr = None
    # Creator resolution: an existing creator or a new one
    creator_id: Optional[int] = None
    new_creator: Optional[NewCreator] = None
    category_slug: Optional[str] = None
    tag_ids: Optional[List[int]] = None
    is_featured: Optional[bool] = None


class RejectionRequest(CamelModel):
    notes: Optional[str] = None


# Admin action results
class ActionResult(CamelModel):
    success: bool
    error: Optional[str] = None


class ApprovalResult(ActionResult):
    resource_id: Optional[int] = None
    resource_slug: Optional[str] = None


class QueueResult(ActionResult):
    id: Optional[int] = None


# Auth Schemas
class LoginRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str
