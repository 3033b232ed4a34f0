"""
Abstract Storage — Interface for all storage backends.

Implementations:
  - SqlStorage      (PostgreSQL / SQLite via SQLAlchemy async)
  - InMemoryStorage (list-based, single-process, seeded, no persistence)

Contract:
  - create surfaces ConstraintViolation on a duplicate unique field
  - update/delete on a missing id return None/False, never raise
  - list views are explicitly ordered: `order` ascending (ties by creation)
    for ordered entities, newest first for feeds
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

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


class BaseStorage(ABC):
    """Interface that all storage backends must implement."""

    name: str = "base"

    # ── Admin users ───────────────────────────────────────────

    @abstractmethod
    async def get_admin_user(self, user_id: str) -> Optional[AdminUser]:
        ...

    @abstractmethod
    async def get_admin_user_by_username(self, username: str) -> Optional[AdminUser]:
        ...

    @abstractmethod
    async def create_admin_user(self, data: AdminUserCreate) -> AdminUser:
        ...

    # ── Services ──────────────────────────────────────────────

    @abstractmethod
    async def get_all_services(self) -> list[Service]:
        ...

    @abstractmethod
    async def get_active_services(self) -> list[Service]:
        ...

    @abstractmethod
    async def get_service(self, service_id: str) -> Optional[Service]:
        ...

    @abstractmethod
    async def create_service(self, data: ServiceCreate) -> Service:
        ...

    @abstractmethod
    async def update_service(self, service_id: str, patch: ServiceUpdate) -> Optional[Service]:
        ...

    @abstractmethod
    async def delete_service(self, service_id: str) -> bool:
        ...

    # ── Projects ──────────────────────────────────────────────

    @abstractmethod
    async def get_all_projects(self) -> list[Project]:
        ...

    @abstractmethod
    async def get_active_projects(self) -> list[Project]:
        ...

    @abstractmethod
    async def get_featured_projects(self) -> list[Project]:
        ...

    @abstractmethod
    async def get_projects_by_category(self, category: str) -> list[Project]:
        ...

    @abstractmethod
    async def get_project(self, project_id: str) -> Optional[Project]:
        ...

    @abstractmethod
    async def create_project(self, data: ProjectCreate) -> Project:
        ...

    @abstractmethod
    async def update_project(self, project_id: str, patch: ProjectUpdate) -> Optional[Project]:
        ...

    @abstractmethod
    async def delete_project(self, project_id: str) -> bool:
        ...

    # ── CV data ───────────────────────────────────────────────

    @abstractmethod
    async def get_all_cv_data(self) -> list[CvData]:
        ...

    @abstractmethod
    async def get_cv_data_by_type(self, cv_type: str) -> list[CvData]:
        ...

    @abstractmethod
    async def get_cv_data_item(self, item_id: str) -> Optional[CvData]:
        ...

    @abstractmethod
    async def create_cv_data(self, data: CvDataCreate) -> CvData:
        ...

    @abstractmethod
    async def update_cv_data(self, item_id: str, patch: CvDataUpdate) -> Optional[CvData]:
        ...

    @abstractmethod
    async def delete_cv_data(self, item_id: str) -> bool:
        ...

    # ── Contact info ──────────────────────────────────────────

    @abstractmethod
    async def get_all_contact_info(self) -> list[ContactInfo]:
        ...

    @abstractmethod
    async def get_active_contact_info(self) -> list[ContactInfo]:
        ...

    @abstractmethod
    async def get_contact_info(self, info_id: str) -> Optional[ContactInfo]:
        ...

    @abstractmethod
    async def create_contact_info(self, data: ContactInfoCreate) -> ContactInfo:
        ...

    @abstractmethod
    async def update_contact_info(self, info_id: str, patch: ContactInfoUpdate) -> Optional[ContactInfo]:
        ...

    @abstractmethod
    async def delete_contact_info(self, info_id: str) -> bool:
        ...

    # ── Contact messages ──────────────────────────────────────

    @abstractmethod
    async def get_all_contact_messages(self) -> list[ContactMessage]:
        ...

    @abstractmethod
    async def get_contact_message(self, message_id: str) -> Optional[ContactMessage]:
        ...

    @abstractmethod
    async def create_contact_message(self, data: ContactMessageCreate) -> ContactMessage:
        ...

    @abstractmethod
    async def update_contact_message_status(
        self, message_id: str, status: MessageStatus | str,
    ) -> Optional[ContactMessage]:
        ...

    @abstractmethod
    async def delete_contact_message(self, message_id: str) -> bool:
        ...

    # ── Site settings (addressed by key) ──────────────────────

    @abstractmethod
    async def get_all_site_settings(self) -> list[SiteSetting]:
        ...

    @abstractmethod
    async def get_site_settings_by_category(self, category: str) -> list[SiteSetting]:
        ...

    @abstractmethod
    async def get_site_setting(self, key: str) -> Optional[SiteSetting]:
        ...

    @abstractmethod
    async def create_site_setting(self, data: SiteSettingCreate) -> SiteSetting:
        ...

    @abstractmethod
    async def update_site_setting(self, key: str, value: str) -> Optional[SiteSetting]:
        ...

    @abstractmethod
    async def delete_site_setting(self, key: str) -> bool:
        ...

    # ── Blog posts ────────────────────────────────────────────

    @abstractmethod
    async def get_all_blog_posts(self) -> list[BlogPost]:
        ...

    @abstractmethod
    async def get_published_blog_posts(self) -> list[BlogPost]:
        ...

    @abstractmethod
    async def get_featured_blog_posts(self) -> list[BlogPost]:
        ...

    @abstractmethod
    async def get_blog_posts_by_category(self, category: str) -> list[BlogPost]:
        ...

    @abstractmethod
    async def get_blog_post(self, post_id: str) -> Optional[BlogPost]:
        ...

    @abstractmethod
    async def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        ...

    @abstractmethod
    async def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        ...

    @abstractmethod
    async def update_blog_post(self, post_id: str, patch: BlogPostUpdate) -> Optional[BlogPost]:
        ...

    @abstractmethod
    async def delete_blog_post(self, post_id: str) -> bool:
        ...

    @abstractmethod
    async def increment_blog_post_views(self, post_id: str) -> None:
        ...

    # ── Testimonials ──────────────────────────────────────────

    @abstractmethod
    async def get_all_testimonials(self) -> list[Testimonial]:
        ...

    @abstractmethod
    async def get_published_testimonials(self) -> list[Testimonial]:
        ...

    @abstractmethod
    async def get_featured_testimonials(self) -> list[Testimonial]:
        ...

    @abstractmethod
    async def get_testimonials_by_project(self, project_id: str) -> list[Testimonial]:
        ...

    @abstractmethod
    async def get_testimonial(self, testimonial_id: str) -> Optional[Testimonial]:
        ...

    @abstractmethod
    async def create_testimonial(self, data: TestimonialCreate) -> Testimonial:
        ...

    @abstractmethod
    async def update_testimonial(
        self, testimonial_id: str, patch: TestimonialUpdate,
    ) -> Optional[Testimonial]:
        ...

    @abstractmethod
    async def delete_testimonial(self, testimonial_id: str) -> bool:
        ...

    # ── Newsletter ────────────────────────────────────────────

    @abstractmethod
    async def get_all_newsletter_subscribers(self) -> list[NewsletterSubscriber]:
        ...

    @abstractmethod
    async def get_active_newsletter_subscribers(self) -> list[NewsletterSubscriber]:
        ...

    @abstractmethod
    async def get_newsletter_subscriber(self, subscriber_id: str) -> Optional[NewsletterSubscriber]:
        ...

    @abstractmethod
    async def get_newsletter_subscriber_by_email(self, email: str) -> Optional[NewsletterSubscriber]:
        ...

    @abstractmethod
    async def create_newsletter_subscriber(
        self, data: NewsletterSubscriberCreate,
    ) -> NewsletterSubscriber:
        ...

    @abstractmethod
    async def unsubscribe_from_newsletter(self, email: str) -> bool:
        ...

    # ── Analytics ─────────────────────────────────────────────

    @abstractmethod
    async def create_analytics_entry(self, data: AnalyticsCreate) -> Analytics:
        ...

    @abstractmethod
    async def get_analytics_by_type(self, event_type: str, days: int = 30) -> list[Analytics]:
        ...

    @abstractmethod
    async def get_analytics_by_date_range(self, start: datetime, end: datetime) -> list[Analytics]:
        ...

    @abstractmethod
    async def get_page_view_stats(self, days: int = 30) -> list[PageViewStat]:
        ...

    # ── Diagnostics ───────────────────────────────────────────

    @abstractmethod
    async def stats(self) -> dict[str, int]:
        """Row count per entity."""
        ...
