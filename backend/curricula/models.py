import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, Table, ForeignKey, JSON, Enum as SQLEnum
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class ResourceType(str, enum.Enum):
    BOOK = "BOOK"
    COURSE = "COURSE"
    YOUTUBE_SERIES = "YOUTUBE_SERIES"
    PODCAST = "PODCAST"
    ARTICLE = "ARTICLE"
    COHORT_PROGRAM = "COHORT_PROGRAM"


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# Association table for resource tags (many-to-many)
resource_tags = Table(
    'resource_tags',
    Base.metadata,
    Column('resource_id', Integer, ForeignKey('resources.id', ondelete='CASCADE'), primary_key=True),
    Column('tag_id', Integer, ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True)
)


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default='user')  # admin, user
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Creator(Base):
    __tablename__ = 'creators'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(1000), nullable=True)
    website_url = Column(String(1000), nullable=True)
    twitter_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    resources = relationship('Resource', back_populates='creator')


class Category(Base):
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    resources = relationship('Resource', back_populates='category')


class Tag(Base):
    __tablename__ = 'tags'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    slug = Column(String(60), unique=True, nullable=False, index=True)

    # Relationships
    resources = relationship('Resource', secondary=resource_tags, back_populates='tags')


class Resource(Base):
    __tablename__ = 'resources'

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    url = Column(String(1000), nullable=False)
    type = Column(SQLEnum(ResourceType, name='resource_type', values_callable=_enum_values), nullable=False)
    price = Column(String(100), nullable=False, default='Free')
    image_url = Column(String(1000), nullable=True)
    creator_id = Column(Integer, ForeignKey('creators.id'), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    # "metadata" is reserved on declarative classes
    meta = Column('metadata', JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    creator = relationship('Creator', back_populates='resources')
    category = relationship('Category', back_populates='resources')
    tags = relationship('Tag', secondary=resource_tags, back_populates='resources')


class PendingSubmission(Base):
    __tablename__ = 'pending_submissions'

    id = Column(Integer, primary_key=True, index=True)

    # Core resource data, denormalized
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    url = Column(String(1000), nullable=False)
    type = Column(SQLEnum(ResourceType, name='resource_type', values_callable=_enum_values), nullable=False)
    price = Column(String(100), nullable=True, default='Unknown')
    image_url = Column(String(1000), nullable=True)

    # Free text, resolved to creators/categories on approval
    creator_name = Column(String(255), nullable=False)
    creator_url = Column(String(1000), nullable=True)
    suggested_category = Column(String(100), nullable=False)
    suggested_tags = Column(JSON, nullable=False, default=list)

    meta = Column('metadata', JSON, nullable=True)

    # Review workflow
    status = Column(
        SQLEnum(SubmissionStatus, name='submission_status', values_callable=_enum_values),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True,
    )
    review_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
