"""
SQLAlchemy ORM models — Cross-database compatible.

Supports: PostgreSQL, SQLite.

Key design decisions:
  - JSON type instead of PostgreSQL-specific JSONB — on PG the dialect maps
    JSON natively; on SQLite it serializes to TEXT.
  - List columns default to [] and the map column to {} so both backends
    hand back the same shapes.
  - String primary keys (uuid hex) — no database-specific sequences.
  - Timestamps use UTCDateTime, so every dialect hands back aware UTC values.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Index, Integer, JSON, String, Text,
)
from sqlalchemy.types import TypeDecorator
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from models.schemas import new_id


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all ORM models."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime normalised to UTC on every dialect.

    SQLite keeps only the wall-clock part of a value, so offsets are folded
    into UTC before binding (comparison parameters included) and naive
    results come back tagged as UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return _as_utc(value)

    def process_result_value(self, value, dialect):
        return _as_utc(value)


class _Timestamps:
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utcnow, onupdate=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Admin users
# ──────────────────────────────────────────────────────────────

class AdminUserRow(_Timestamps, Base):
    __tablename__ = "admin_users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)


# ──────────────────────────────────────────────────────────────
#  Services & projects
# ──────────────────────────────────────────────────────────────

class ServiceRow(_Timestamps, Base):
    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    title_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[str] = mapped_column(String(64), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False, default="blue")
    features: Mapped[Any] = mapped_column(JSON, default=list)
    features_en: Mapped[Any] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    order: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        Index("ix_services_active_order", "is_active", "order"),
    )


class ProjectRow(_Timestamps, Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    title_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    technologies: Mapped[Any] = mapped_column(JSON, default=list)
    images: Mapped[Any] = mapped_column(JSON, default=list)
    live_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    github_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="web")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        Index("ix_projects_category", "category"),
    )


# ──────────────────────────────────────────────────────────────
#  CV entries
# ──────────────────────────────────────────────────────────────

class CvDataRow(_Timestamps, Base):
    __tablename__ = "cv_data"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    title_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subtitle: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subtitle_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    end_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    skills: Mapped[Any] = mapped_column(JSON, default=list)
    level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    order: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        Index("ix_cv_data_type", "type"),
    )


# ──────────────────────────────────────────────────────────────
#  Contact info & messages
# ──────────────────────────────────────────────────────────────

class ContactInfoRow(_Timestamps, Base):
    __tablename__ = "contact_info"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    label: Mapped[str] = mapped_column(Text, nullable=False)
    label_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    order: Mapped[int] = mapped_column(Integer, default=0)


class ContactMessageRow(_Timestamps, Base):
    __tablename__ = "contact_messages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    service_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="unread")

    __table_args__ = (
        Index("ix_contact_messages_created", "created_at"),
    )


# ──────────────────────────────────────────────────────────────
#  Site settings
# ──────────────────────────────────────────────────────────────

class SiteSettingRow(_Timestamps, Base):
    __tablename__ = "site_settings"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    key: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="text")
    category: Mapped[Optional[str]] = mapped_column(String(64), default="general")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


# ──────────────────────────────────────────────────────────────
#  Blog & testimonials
# ──────────────────────────────────────────────────────────────

class BlogPostRow(_Timestamps, Base):
    __tablename__ = "blog_posts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    title_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    slug_en: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    content_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    excerpt_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    featured_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[Any] = mapped_column(JSON, default=list)
    tags_en: Mapped[Any] = mapped_column(JSON, default=list)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    category_en: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    published_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reading_time: Mapped[int] = mapped_column(Integer, default=5)
    author_id: Mapped[Optional[str]] = mapped_column(String(64), ForeignKey("admin_users.id"), nullable=True)

    __table_args__ = (
        Index("ix_blog_posts_published", "is_published", "published_at"),
        Index("ix_blog_posts_category", "category"),
    )


class TestimonialRow(_Timestamps, Base):
    __tablename__ = "testimonials"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    client_name: Mapped[str] = mapped_column(Text, nullable=False)
    client_name_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_title_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_company: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_company_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    testimonial: Mapped[str] = mapped_column(Text, nullable=False)
    testimonial_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    client_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    project_id: Mapped[Optional[str]] = mapped_column(String(64), ForeignKey("projects.id"), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        Index("ix_testimonials_project", "project_id"),
    )


# ──────────────────────────────────────────────────────────────
#  Newsletter & analytics
# ──────────────────────────────────────────────────────────────

class NewsletterSubscriberRow(Base):
    __tablename__ = "newsletter_subscribers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utcnow)
    subscribed_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utcnow)
    unsubscribed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)


class AnalyticsRow(Base):
    __tablename__ = "analytics"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    session_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    metadata_: Mapped[Any] = mapped_column("metadata", JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utcnow)

    __table_args__ = (
        Index("ix_analytics_type_created", "type", "created_at"),
    )
