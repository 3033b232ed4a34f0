"""
InMemoryStorage — List-backed store for degraded mode, development and testing.

Features:
  - Zero infrastructure (no database)
  - Same contract as SqlStorage for admin users, services, projects, CV data,
    contact info, contact messages and site settings
  - Seeded with the default content on construction (idempotent)
  - Safe under asyncio: no operation awaits between its read and its write
  - All data lost on process restart

Blog posts, testimonials, newsletter subscribers and analytics need the
database: reads come back empty and creates raise NotImplementedInMemory.
"""
from __future__ import annotations

import structlog
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from config.settings import AdminSeedConfig
from database import seed
from database.errors import ConstraintViolation, NotImplementedInMemory
from database.store_base import BaseStorage
from models.schemas import (
    AdminUser, AdminUserCreate,
    Analytics, AnalyticsCreate,
    BlogPost, BlogPostCreate, BlogPostUpdate,
    ContactInfo, ContactInfoCreate, ContactInfoUpdate,
    ContactMessage, ContactMessageCreate, MessageStatus,
    CvData, CvDataCreate, CvDataUpdate,
    NewsletterSubscriber, NewsletterSubscriberCreate,
    PageViewStat,
    Project, ProjectCreate, ProjectUpdate,
    Service, ServiceCreate, ServiceUpdate,
    SiteSetting, SiteSettingCreate,
    Testimonial, TestimonialCreate, TestimonialUpdate,
)

logger = structlog.get_logger()

R = TypeVar("R")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _copy(record: Optional[R]) -> Optional[R]:
    return record.model_copy(deep=True) if record is not None else None


def _by_order(records: list) -> list:
    # sorted() is stable, so equal `order` keeps insertion order
    return [r.model_copy(deep=True) for r in sorted(records, key=lambda r: r.order)]


def _find_index(records: list, record_id: str) -> int:
    return next((i for i, r in enumerate(records) if r.id == record_id), -1)


def _merge(records: list, record_id: str, changes: dict[str, Any]):
    """Shallow-merge `changes` over the record with `record_id`, refreshing updated_at."""
    index = _find_index(records, record_id)
    if index == -1:
        return None
    current = records[index]
    merged = type(current).model_validate({
        **current.model_dump(), **changes, "updated_at": _utcnow(),
    })
    records[index] = merged
    return merged.model_copy(deep=True)


def _remove(records: list, record_id: str) -> bool:
    index = _find_index(records, record_id)
    if index == -1:
        return False
    del records[index]
    return True


class InMemoryStorage(BaseStorage):
    """
    Full-featured in-memory store for the core content entities.
    Returns copies so callers never mutate stored records.
    """

    name = "memory"

    def __init__(self, admin: AdminSeedConfig = None, seed_on_init: bool = True):
        self._admin_users: list[AdminUser] = []
        self._services: list[Service] = []
        self._projects: list[Project] = []
        self._cv_data: list[CvData] = []
        self._contact_info: list[ContactInfo] = []
        self._contact_messages: list[ContactMessage] = []
        self._site_settings: list[SiteSetting] = []

        self._admin_seed = admin or AdminSeedConfig()
        self._initialized = False
        if seed_on_init:
            self.seed_defaults()
        logger.info("inmemory_store_initialized", seeded=self._initialized)

    def seed_defaults(self) -> None:
        """Load the default content. Repeated calls are no-ops."""
        if self._initialized:
            return

        admin = seed.admin_user(
            self._admin_seed.username, self._admin_seed.email, self._admin_seed.password,
        )
        self._admin_users.append(AdminUser(**admin.model_dump()))
        self._services.extend(Service(**s.model_dump()) for s in seed.SERVICES)
        self._projects.extend(Project(**p.model_dump()) for p in seed.PROJECTS)
        self._contact_info.extend(ContactInfo(**c.model_dump()) for c in seed.CONTACT_INFO)
        self._cv_data.extend(CvData(**c.model_dump()) for c in seed.CV_DATA)
        self._site_settings.extend(SiteSetting(**s.model_dump()) for s in seed.SITE_SETTINGS)

        self._initialized = True
        logger.info("inmemory_store_seeded", **self._counts())

    # ── Admin users ───────────────────────────────────────────

    async def get_admin_user(self, user_id: str) -> Optional[AdminUser]:
        return _copy(next((u for u in self._admin_users if u.id == user_id), None))

    async def get_admin_user_by_username(self, username: str) -> Optional[AdminUser]:
        return _copy(next((u for u in self._admin_users if u.username == username), None))

    async def create_admin_user(self, data: AdminUserCreate) -> AdminUser:
        for existing in self._admin_users:
            if existing.username == data.username:
                raise ConstraintViolation("admin_users", "username", data.username, backend=self.name)
            if existing.email == data.email:
                raise ConstraintViolation("admin_users", "email", data.email, backend=self.name)
        user = AdminUser(**data.model_dump())
        self._admin_users.append(user)
        return _copy(user)

    # ── Services ──────────────────────────────────────────────

    async def get_all_services(self) -> list[Service]:
        return _by_order(self._services)

    async def get_active_services(self) -> list[Service]:
        return _by_order([s for s in self._services if s.is_active])

    async def get_service(self, service_id: str) -> Optional[Service]:
        return _copy(next((s for s in self._services if s.id == service_id), None))

    async def create_service(self, data: ServiceCreate) -> Service:
        service = Service(**data.model_dump())
        self._services.append(service)
        return _copy(service)

    async def update_service(self, service_id: str, patch: ServiceUpdate) -> Optional[Service]:
        return _merge(self._services, service_id, patch.changes())

    async def delete_service(self, service_id: str) -> bool:
        return _remove(self._services, service_id)

    # ── Projects ──────────────────────────────────────────────

    async def get_all_projects(self) -> list[Project]:
        return _by_order(self._projects)

    async def get_active_projects(self) -> list[Project]:
        return _by_order([p for p in self._projects if p.is_active])

    async def get_featured_projects(self) -> list[Project]:
        return _by_order([p for p in self._projects if p.is_featured])

    async def get_projects_by_category(self, category: str) -> list[Project]:
        return _by_order([p for p in self._projects if p.category == category])

    async def get_project(self, project_id: str) -> Optional[Project]:
        return _copy(next((p for p in self._projects if p.id == project_id), None))

    async def create_project(self, data: ProjectCreate) -> Project:
        project = Project(**data.model_dump())
        self._projects.append(project)
        return _copy(project)

    async def update_project(self, project_id: str, patch: ProjectUpdate) -> Optional[Project]:
        return _merge(self._projects, project_id, patch.changes())

    async def delete_project(self, project_id: str) -> bool:
        return _remove(self._projects, project_id)

    # ── CV data ───────────────────────────────────────────────

    async def get_all_cv_data(self) -> list[CvData]:
        return _by_order(self._cv_data)

    async def get_cv_data_by_type(self, cv_type: str) -> list[CvData]:
        return _by_order([c for c in self._cv_data if c.type == cv_type])

    async def get_cv_data_item(self, item_id: str) -> Optional[CvData]:
        return _copy(next((c for c in self._cv_data if c.id == item_id), None))

    async def create_cv_data(self, data: CvDataCreate) -> CvData:
        item = CvData(**data.model_dump())
        self._cv_data.append(item)
        return _copy(item)

    async def update_cv_data(self, item_id: str, patch: CvDataUpdate) -> Optional[CvData]:
        return _merge(self._cv_data, item_id, patch.changes())

    async def delete_cv_data(self, item_id: str) -> bool:
        return _remove(self._cv_data, item_id)

    # ── Contact info ──────────────────────────────────────────

    async def get_all_contact_info(self) -> list[ContactInfo]:
        return _by_order(self._contact_info)

    async def get_active_contact_info(self) -> list[ContactInfo]:
        return _by_order([c for c in self._contact_info if c.is_active])

    async def get_contact_info(self, info_id: str) -> Optional[ContactInfo]:
        return _copy(next((c for c in self._contact_info if c.id == info_id), None))

    async def create_contact_info(self, data: ContactInfoCreate) -> ContactInfo:
        info = ContactInfo(**data.model_dump())
        self._contact_info.append(info)
        return _copy(info)

    async def update_contact_info(self, info_id: str, patch: ContactInfoUpdate) -> Optional[ContactInfo]:
        return _merge(self._contact_info, info_id, patch.changes())

    async def delete_contact_info(self, info_id: str) -> bool:
        return _remove(self._contact_info, info_id)

    # ── Contact messages ──────────────────────────────────────

    async def get_all_contact_messages(self) -> list[ContactMessage]:
        # Newest first, ties newest-inserted first
        messages = sorted(reversed(self._contact_messages), key=lambda m: m.created_at, reverse=True)
        return [m.model_copy(deep=True) for m in messages]

    async def get_contact_message(self, message_id: str) -> Optional[ContactMessage]:
        return _copy(next((m for m in self._contact_messages if m.id == message_id), None))

    async def create_contact_message(self, data: ContactMessageCreate) -> ContactMessage:
        message = ContactMessage(**data.model_dump())
        self._contact_messages.append(message)
        return _copy(message)

    async def update_contact_message_status(
        self, message_id: str, status: MessageStatus | str,
    ) -> Optional[ContactMessage]:
        return _merge(self._contact_messages, message_id, {"status": MessageStatus(status).value})

    async def delete_contact_message(self, message_id: str) -> bool:
        return _remove(self._contact_messages, message_id)

    # ── Site settings ─────────────────────────────────────────

    async def get_all_site_settings(self) -> list[SiteSetting]:
        return [s.model_copy(deep=True) for s in self._site_settings]

    async def get_site_settings_by_category(self, category: str) -> list[SiteSetting]:
        return [s.model_copy(deep=True) for s in self._site_settings if s.category == category]

    async def get_site_setting(self, key: str) -> Optional[SiteSetting]:
        return _copy(next((s for s in self._site_settings if s.key == key), None))

    async def create_site_setting(self, data: SiteSettingCreate) -> SiteSetting:
        if any(s.key == data.key for s in self._site_settings):
            raise ConstraintViolation("site_settings", "key", data.key, backend=self.name)
        setting = SiteSetting(**data.model_dump())
        self._site_settings.append(setting)
        return _copy(setting)

    async def update_site_setting(self, key: str, value: str) -> Optional[SiteSetting]:
        setting = next((s for s in self._site_settings if s.key == key), None)
        if setting is None:
            return None
        return _merge(self._site_settings, setting.id, {"value": value})

    async def delete_site_setting(self, key: str) -> bool:
        setting = next((s for s in self._site_settings if s.key == key), None)
        return _remove(self._site_settings, setting.id) if setting else False

    # ── Blog posts (database only) ────────────────────────────

    async def get_all_blog_posts(self) -> list[BlogPost]:
        return []

    async def get_published_blog_posts(self) -> list[BlogPost]:
        return []

    async def get_featured_blog_posts(self) -> list[BlogPost]:
        return []

    async def get_blog_posts_by_category(self, category: str) -> list[BlogPost]:
        return []

    async def get_blog_post(self, post_id: str) -> Optional[BlogPost]:
        return None

    async def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return None

    async def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        raise NotImplementedInMemory("create_blog_post")

    async def update_blog_post(self, post_id: str, patch: BlogPostUpdate) -> Optional[BlogPost]:
        return None

    async def delete_blog_post(self, post_id: str) -> bool:
        return False

    async def increment_blog_post_views(self, post_id: str) -> None:
        return None

    # ── Testimonials (database only) ──────────────────────────

    async def get_all_testimonials(self) -> list[Testimonial]:
        return []

    async def get_published_testimonials(self) -> list[Testimonial]:
        return []

    async def get_featured_testimonials(self) -> list[Testimonial]:
        return []

    async def get_testimonials_by_project(self, project_id: str) -> list[Testimonial]:
        return []

    async def get_testimonial(self, testimonial_id: str) -> Optional[Testimonial]:
        return None

    async def create_testimonial(self, data: TestimonialCreate) -> Testimonial:
        raise NotImplementedInMemory("create_testimonial")

    async def update_testimonial(
        self, testimonial_id: str, patch: TestimonialUpdate,
    ) -> Optional[Testimonial]:
        return None

    async def delete_testimonial(self, testimonial_id: str) -> bool:
        return False

    # ── Newsletter (database only) ────────────────────────────

    async def get_all_newsletter_subscribers(self) -> list[NewsletterSubscriber]:
        return []

    async def get_active_newsletter_subscribers(self) -> list[NewsletterSubscriber]:
        return []

    async def get_newsletter_subscriber(self, subscriber_id: str) -> Optional[NewsletterSubscriber]:
        return None

    async def get_newsletter_subscriber_by_email(self, email: str) -> Optional[NewsletterSubscriber]:
        return None

    async def create_newsletter_subscriber(
        self, data: NewsletterSubscriberCreate,
    ) -> NewsletterSubscriber:
        raise NotImplementedInMemory("create_newsletter_subscriber")

    async def unsubscribe_from_newsletter(self, email: str) -> bool:
        return False

    # ── Analytics (database only) ─────────────────────────────

    async def create_analytics_entry(self, data: AnalyticsCreate) -> Analytics:
        raise NotImplementedInMemory("create_analytics_entry")

    async def get_analytics_by_type(self, event_type: str, days: int = 30) -> list[Analytics]:
        return []

    async def get_analytics_by_date_range(self, start: datetime, end: datetime) -> list[Analytics]:
        return []

    async def get_page_view_stats(self, days: int = 30) -> list[PageViewStat]:
        return []

    # ── Stats (for debugging) ─────────────────────────────────

    def _counts(self) -> dict[str, int]:
        return {
            "admin_users": len(self._admin_users),
            "services": len(self._services),
            "projects": len(self._projects),
            "cv_data": len(self._cv_data),
            "contact_info": len(self._contact_info),
            "contact_messages": len(self._contact_messages),
            "site_settings": len(self._site_settings),
            "blog_posts": 0,
            "testimonials": 0,
            "newsletter_subscribers": 0,
            "analytics": 0,
        }

    async def stats(self) -> dict[str, int]:
        return self._counts()
