"""
Database initialization script for the resource directory.
Run this once to create the database tables and seed reference data.
"""
from sqlalchemy.orm import Session

from curricula.database import engine, SessionLocal
from curricula.models import Base, Category, Tag
from curricula.services.slugs import slugify
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Productivity", "description": "Systems and habits for doing focused, meaningful work"},
    {"name": "Software Development", "description": "Programming, tooling and engineering practice"},
    {"name": "Wellness", "description": "Health, fitness and mental wellbeing"},
    {"name": "Business", "description": "Entrepreneurship, strategy and management"},
    {"name": "Finance", "description": "Personal finance and investing"},
    {"name": "Design", "description": "Product, visual and interaction design"},
]

DEFAULT_TAGS = [
    "Beginner Friendly",
    "Deep Work",
    "Note Taking",
    "JavaScript",
    "Startups",
    "Career",
    "Habits",
    "Investing",
]


def seed_reference_data(db: Session) -> None:
    """Insert the default categories and tags that are missing."""
    for cat_data in DEFAULT_CATEGORIES:
        slug = slugify(cat_data["name"])
        existing = db.query(Category).filter(Category.slug == slug).first()
        if not existing:
            db.add(Category(slug=slug, **cat_data))
            logger.info(f"Added category: {cat_data['name']}")

    for name in DEFAULT_TAGS:
        slug = slugify(name)
        existing = db.query(Tag).filter(Tag.slug == slug).first()
        if not existing:
            db.add(Tag(name=name, slug=slug))
            logger.info(f"Added tag: {name}")

    db.commit()


def init_db():
    """Create all database tables and seed categories and tags."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully!")

    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()
    logger.info("Default categories and tags added!")

if __name__ == "__main__":
    init_db()
