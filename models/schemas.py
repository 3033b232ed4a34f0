"""
Core data models for the portfolio storage service.
These are the record shapes shared by both storage backends and the API.

For every entity there are three shapes:
  - <Entity>        full record as returned by any backend
  - <Entity>Create  validated insert payload (no server-assigned fields)
  - <Entity>Update  partial patch, every field optional
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, ClassVar, Optional

from pydantic import (
    AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field,
    model_validator,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


def _none_to_dict(value: Any) -> Any:
    return {} if value is None else value


# Ordered list fields never come back as null
StrList = Annotated[list[str], BeforeValidator(_none_to_list)]
Metadata = Annotated[dict[str, Any], BeforeValidator(_none_to_dict)]

Rating = Annotated[int, Field(ge=1, le=5)]


# ──────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────

class CvDataType(str, Enum):
    PERSONAL = "personal"
    SUMMARY = "summary"
    EDUCATION = "education"
    EXPERIENCE = "experience"
    SKILL = "skill"
    CERTIFICATION = "certification"
    PROJECT = "project"
    LANGUAGE = "language"
    HOBBY = "hobby"


class ContactInfoType(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    SOCIAL = "social"
    ADDRESS = "address"


class MessageStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"


class SettingType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class AnalyticsType(str, Enum):
    PAGE_VIEW = "page_view"
    CONTACT_FORM = "contact_form"
    PROJECT_VIEW = "project_view"
    DOWNLOAD = "download"


class _Record(BaseModel):
    """Base for full records; validates straight from ORM rows."""
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=_utcnow)


class _Payload(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    # Patch fields that hold lists (null → []) and fields that may not be nulled
    list_fields: ClassVar[tuple[str, ...]] = ()
    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually set, as a shallow-merge patch."""
        data = self.model_dump(exclude_unset=True)
        for name in self.list_fields:
            if name in data and data[name] is None:
                data[name] = []
        return data


# ──────────────────────────────────────────────────────────────
#  Admin users
# ──────────────────────────────────────────────────────────────

class AdminUserCreate(_Payload):
    username: str
    password: str                             # already hashed by the caller
    email: str


class AdminUser(_Record):
    username: str
    password: str
    email: str
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Services
# ──────────────────────────────────────────────────────────────

class ServiceCreate(_Payload):
    title: str
    title_en: Optional[str] = None
    description: str = ""
    description_en: Optional[str] = None
    icon: str
    color: str = "blue"
    features: StrList = []
    features_en: StrList = []
    is_active: bool = True
    order: int = 0


class ServiceUpdate(_Payload):
    list_fields = ("features", "features_en")
    non_nullable = ("title", "description", "icon", "color", "is_active", "order")

    title: Optional[str] = None
    title_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    features: Optional[StrList] = None
    features_en: Optional[StrList] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class Service(_Record, ServiceCreate):
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Projects
# ──────────────────────────────────────────────────────────────

class ProjectCreate(_Payload):
    title: str
    title_en: Optional[str] = None
    description: str
    description_en: Optional[str] = None
    short_description: Optional[str] = None
    short_description_en: Optional[str] = None
    technologies: StrList = []
    images: StrList = []
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    category: str = "web"
    is_active: bool = True
    is_featured: bool = False
    order: int = 0


class ProjectUpdate(_Payload):
    list_fields = ("technologies", "images")
    non_nullable = ("title", "description", "category", "is_active", "is_featured", "order")

    title: Optional[str] = None
    title_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    short_description: Optional[str] = None
    short_description_en: Optional[str] = None
    technologies: Optional[StrList] = None
    images: Optional[StrList] = None
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    order: Optional[int] = None


class Project(_Record, ProjectCreate):
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  CV entries — `type` is the discriminant, `level` only means
#  something for skills
# ──────────────────────────────────────────────────────────────

class CvDataCreate(_Payload):
    type: CvDataType
    title: str
    title_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    subtitle: Optional[str] = None            # institution, company, ...
    subtitle_en: Optional[str] = None
    start_date: Optional[str] = None          # free text, e.g. "2019" or "Present"
    end_date: Optional[str] = None
    location: Optional[str] = None
    location_en: Optional[str] = None
    skills: StrList = []
    level: Optional[Rating] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True
    order: int = 0


class CvDataUpdate(_Payload):
    list_fields = ("skills",)
    non_nullable = ("type", "title", "is_active", "order")

    type: Optional[CvDataType] = None
    title: Optional[str] = None
    title_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    subtitle: Optional[str] = None
    subtitle_en: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    location: Optional[str] = None
    location_en: Optional[str] = None
    skills: Optional[StrList] = None
    level: Optional[Rating] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class CvData(_Record, CvDataCreate):
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Contact info & inbound messages
# ──────────────────────────────────────────────────────────────

class ContactInfoCreate(_Payload):
    type: ContactInfoType
    label: str
    label_en: Optional[str] = None
    value: str
    icon: str
    url: Optional[str] = None                 # social profile links
    is_primary: bool = False
    is_active: bool = True
    order: int = 0


class ContactInfoUpdate(_Payload):
    non_nullable = ("type", "label", "value", "icon", "is_primary", "is_active", "order")

    type: Optional[ContactInfoType] = None
    label: Optional[str] = None
    label_en: Optional[str] = None
    value: Optional[str] = None
    icon: Optional[str] = None
    url: Optional[str] = None
    is_primary: Optional[bool] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class ContactInfo(_Record, ContactInfoCreate):
    updated_at: datetime = Field(default_factory=_utcnow)


class ContactMessageCreate(_Payload):
    name: str
    email: str
    subject: str
    service_type: Optional[str] = None
    message: str


class ContactMessage(_Record, ContactMessageCreate):
    status: MessageStatus = MessageStatus.UNREAD
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Site settings — `value` is opaque text, interpreted by the caller
# ──────────────────────────────────────────────────────────────

class SiteSettingCreate(_Payload):
    key: str
    value: str
    type: SettingType = SettingType.TEXT
    category: Optional[str] = "general"
    description: Optional[str] = None
    description_en: Optional[str] = None


class SiteSetting(_Record, SiteSettingCreate):
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Blog
# ──────────────────────────────────────────────────────────────

class BlogPostCreate(_Payload):
    title: str
    title_en: Optional[str] = None
    slug: str
    slug_en: Optional[str] = None
    content: str
    content_en: Optional[str] = None
    excerpt: Optional[str] = None
    excerpt_en: Optional[str] = None
    featured_image: Optional[str] = None
    tags: StrList = []
    tags_en: StrList = []
    category: str = "general"
    category_en: Optional[str] = None
    is_published: bool = False
    is_featured: bool = False
    published_at: Optional[datetime] = None
    reading_time: int = 5                     # minutes
    author_id: Optional[str] = None


class BlogPostUpdate(_Payload):
    list_fields = ("tags", "tags_en")
    non_nullable = (
        "title", "slug", "content", "category",
        "is_published", "is_featured", "reading_time",
    )

    title: Optional[str] = None
    title_en: Optional[str] = None
    slug: Optional[str] = None
    slug_en: Optional[str] = None
    content: Optional[str] = None
    content_en: Optional[str] = None
    excerpt: Optional[str] = None
    excerpt_en: Optional[str] = None
    featured_image: Optional[str] = None
    tags: Optional[StrList] = None
    tags_en: Optional[StrList] = None
    category: Optional[str] = None
    category_en: Optional[str] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    published_at: Optional[datetime] = None
    reading_time: Optional[int] = None
    author_id: Optional[str] = None


class BlogPost(_Record, BlogPostCreate):
    view_count: int = 0
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Testimonials
# ──────────────────────────────────────────────────────────────

class TestimonialCreate(_Payload):
    client_name: str
    client_name_en: Optional[str] = None
    client_title: Optional[str] = None
    client_title_en: Optional[str] = None
    client_company: Optional[str] = None
    client_company_en: Optional[str] = None
    testimonial: str
    testimonial_en: Optional[str] = None
    rating: Rating = 5
    client_image: Optional[str] = None
    project_id: Optional[str] = None
    is_published: bool = True
    is_featured: bool = False
    order: int = 0


class TestimonialUpdate(_Payload):
    non_nullable = ("client_name", "testimonial", "rating", "is_published", "is_featured", "order")

    client_name: Optional[str] = None
    client_name_en: Optional[str] = None
    client_title: Optional[str] = None
    client_title_en: Optional[str] = None
    client_company: Optional[str] = None
    client_company_en: Optional[str] = None
    testimonial: Optional[str] = None
    testimonial_en: Optional[str] = None
    rating: Optional[Rating] = None
    client_image: Optional[str] = None
    project_id: Optional[str] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    order: Optional[int] = None


class Testimonial(_Record, TestimonialCreate):
    updated_at: datetime = Field(default_factory=_utcnow)


# ──────────────────────────────────────────────────────────────
#  Newsletter & analytics
# ──────────────────────────────────────────────────────────────

class NewsletterSubscriberCreate(_Payload):
    email: str
    name: Optional[str] = None


class NewsletterSubscriber(_Record, NewsletterSubscriberCreate):
    is_active: bool = True
    subscribed_at: datetime = Field(default_factory=_utcnow)
    unsubscribed_at: Optional[datetime] = None


class AnalyticsCreate(_Payload):
    type: AnalyticsType
    path: Optional[str] = None
    user_agent: Optional[str] = None
    ip: Optional[str] = None
    country: Optional[str] = None
    referrer: Optional[str] = None
    session_id: Optional[str] = None
    metadata: Metadata = {}                   # opaque pass-through


class Analytics(_Record):
    type: AnalyticsType
    path: Optional[str] = None
    user_agent: Optional[str] = None
    ip: Optional[str] = None
    country: Optional[str] = None
    referrer: Optional[str] = None
    session_id: Optional[str] = None
    # ORM rows expose the column as `metadata_`
    metadata: Metadata = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metadata_", "metadata"),
    )


class PageViewStat(BaseModel):
    path: str
    views: int


# ──────────────────────────────────────────────────────────────
#  Search
# ──────────────────────────────────────────────────────────────

class SearchType(str, Enum):
    BLOG = "blog"
    PROJECT = "project"
    TESTIMONIAL = "testimonial"


class SearchResult(BaseModel):
    """One hit from the public site search, flattened across entity kinds."""
    model_config = ConfigDict(use_enum_values=True)

    type: SearchType
    id: str
    title: str
    title_en: Optional[str] = None
    excerpt: Optional[str] = None
    excerpt_en: Optional[str] = None
    url: str
    category: Optional[str] = None
    category_en: Optional[str] = None
    tags: list[str] = []
    tags_en: list[str] = []
    published_at: Optional[datetime] = None
    rating: Optional[int] = None
    client_name: Optional[str] = None
    client_name_en: Optional[str] = None


# ──────────────────────────────────────────────────────────────
#  Health
# ──────────────────────────────────────────────────────────────

class HealthStatus(BaseModel):
    """Externally observable state of the storage manager."""
    model_config = ConfigDict(populate_by_name=True)

    storage_type: str = Field(serialization_alias="storageType")
    using_database: bool = Field(serialization_alias="usingDatabase")
    status: str                               # healthy | degraded
    message: str
