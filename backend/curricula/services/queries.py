"""
Read-only queries for the public pages and the admin review form.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from curricula.models import Category, Creator, Resource, Tag, resource_tags


def _resource_query(db: Session):
    return db.query(Resource).options(
        joinedload(Resource.creator),
        joinedload(Resource.category),
        selectinload(Resource.tags),
    )


def _ordered(query):
    # Featured first, newest next
    return query.order_by(Resource.is_featured.desc(), Resource.created_at.desc(), Resource.id.desc())


def list_resources(
    db: Session,
    category_slug: Optional[str] = None,
    tag_slug: Optional[str] = None,
) -> List[Resource]:
    """
    List published resources with their creator and category.

    Both filters are optional and combine with AND. No pagination.
    """
    query = _resource_query(db)

    if category_slug:
        query = query.join(Category, Resource.category_id == Category.id).filter(
            Category.slug == category_slug
        )

    if tag_slug:
        query = (
            query.join(resource_tags, resource_tags.c.resource_id == Resource.id)
            .join(Tag, Tag.id == resource_tags.c.tag_id)
            .filter(Tag.slug == tag_slug)
        )

    return _ordered(query).all()


def get_resource_by_slug(db: Session, slug: str) -> Optional[Resource]:
    return _resource_query(db).filter(Resource.slug == slug).first()


def get_related_resources(db: Session, category_id: int, exclude_resource_id: int, limit: int = 4) -> List[Resource]:
    """Resources in the same category, excluding the one being viewed."""
    query = _resource_query(db).filter(
        Resource.category_id == category_id,
        Resource.id != exclude_resource_id,
    )
    return _ordered(query).limit(limit).all()


def get_creator_by_slug(db: Session, slug: str) -> Optional[Creator]:
    return db.query(Creator).filter(Creator.slug == slug).first()


def get_resources_by_creator(db: Session, creator_id: int) -> List[Resource]:
    return _ordered(_resource_query(db).filter(Resource.creator_id == creator_id)).all()


def get_category_by_slug(db: Session, slug: str) -> Optional[Category]:
    return db.query(Category).filter(Category.slug == slug).first()


def get_categories_with_counts(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(Category, func.count(Resource.id))
        .outerjoin(Resource, Resource.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
        .all()
    )
    return [
        {
            "id": category.id,
            "name": category.name,
            "slug": category.slug,
            "description": category.description,
            "resource_count": count,
        }
        for category, count in rows
    ]


def get_tags_with_counts(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(Tag, func.count(resource_tags.c.resource_id))
        .outerjoin(resource_tags, resource_tags.c.tag_id == Tag.id)
        .group_by(Tag.id)
        .order_by(Tag.name)
        .all()
    )
    return [
        {"id": tag.id, "name": tag.name, "slug": tag.slug, "resource_count": count}
        for tag, count in rows
    ]


# Reference data for the approval form
def list_creators(db: Session) -> List[Creator]:
    return db.query(Creator).order_by(Creator.name).all()


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()


def list_tags(db: Session) -> List[Tag]:
    return db.query(Tag).order_by(Tag.name).all()
