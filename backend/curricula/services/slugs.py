"""
Slug generation for resources and creators.
"""
import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from curricula.exceptions import ConflictError

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 100
MAX_INSERT_ATTEMPTS = 50

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Normalize a display name into a URL-safe slug.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single hyphen, strips leading/trailing hyphens and truncates to 100
    characters. Normalizing an existing slug returns it unchanged.
    """
    slug = _NON_ALNUM.sub("-", name.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def _candidate(base: str, counter: int) -> str:
    return base if counter == 0 else f"{base}-{counter}"


def next_free_slug(db: Session, model, base: str, start: int = 0) -> str:
    """
    Try ``base``, ``base-1``, ``base-2``... (from suffix ``start``) and return
    the first slug with no row in the model's table.

    The result is only free at the time of the check; use
    insert_with_unique_slug to insert safely.
    """
    counter = start
    while True:
        slug = _candidate(base, counter)
        exists = db.query(model.id).filter(model.slug == slug).first()
        if not exists:
            return slug
        counter += 1


def _suffix_of(slug: str, base: str) -> int:
    if slug == base:
        return 0
    return int(slug[len(base) + 1:])


def _is_slug_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "slug" in message and ("unique" in message or "duplicate" in message)


def insert_with_unique_slug(db: Session, obj, name: str, fallback: str) -> str:
    """
    Insert ``obj`` with a unique slug derived from ``name``.

    Each attempt runs inside a SAVEPOINT. If another transaction took the
    candidate slug between the lookup and the insert, the savepoint is rolled
    back and the search resumes at the next suffix. Integrity errors unrelated to
    the slug propagate unchanged.

    Returns the slug that was stored.
    """
    model = type(obj)
    base = slugify(name) or fallback
    slug = next_free_slug(db, model, base)

    for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
        obj.slug = slug
        try:
            with db.begin_nested():
                db.add(obj)
                db.flush()
            return slug
        except IntegrityError as e:
            if not _is_slug_conflict(e):
                raise
            logger.warning(
                f"Slug '{slug}' for {model.__tablename__} was taken concurrently "
                f"(attempt {attempt}/{MAX_INSERT_ATTEMPTS}); retrying"
            )
            slug = next_free_slug(db, model, base, start=_suffix_of(slug, base) + 1)

    raise ConflictError(f"Could not allocate a unique slug for '{name}'")
