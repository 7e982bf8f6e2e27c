from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from curricula.database import get_db
from curricula.schemas import (
    BrowseResponse, CreatorDetailResponse, HomeResponse, ResourceDetailResponse, ResourceResponse
)
from curricula.services import queries

router = APIRouter(tags=["resources"])

# ============================================================================
# PUBLIC ENDPOINTS (Consumer Frontend)
# ============================================================================

@router.get("/home", response_model=HomeResponse)
async def home(
    category: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Categories with resource counts and the resource listing,
    optionally narrowed to one category.
    """
    return HomeResponse(
        categories=queries.get_categories_with_counts(db),
        resources=queries.list_resources(db, category_slug=category),
    )

@router.get("/browse", response_model=BrowseResponse)
async def browse(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Browse resources by category and/or tag.
    """
    return BrowseResponse(
        categories=queries.get_categories_with_counts(db),
        tags=queries.get_tags_with_counts(db),
        resources=queries.list_resources(db, category_slug=category, tag_slug=tag),
    )

@router.get("/resources", response_model=List[ResourceResponse])
async def list_resources(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List resources, featured first then newest.
    """
    return queries.list_resources(db, category_slug=category, tag_slug=tag)

@router.get("/resources/{slug}", response_model=ResourceDetailResponse)
async def get_resource(
    slug: str,
    db: Session = Depends(get_db)
):
    """
    Get a single resource by slug, with related resources from its category.
    """
    resource = queries.get_resource_by_slug(db, slug)

    if not resource:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resource '{slug}' not found"
        )

    related = queries.get_related_resources(db, resource.category_id, resource.id)
    return ResourceDetailResponse(resource=resource, related=related)

@router.get("/creators/{slug}", response_model=CreatorDetailResponse)
async def get_creator(
    slug: str,
    db: Session = Depends(get_db)
):
    """
    Get a creator and everything they made.
    """
    creator = queries.get_creator_by_slug(db, slug)

    if not creator:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Creator '{slug}' not found"
        )

    return CreatorDetailResponse(
        creator=creator,
        resources=queries.get_resources_by_creator(db, creator.id),
    )
