"""
SqlStorage — Portable SQL queries for PostgreSQL and SQLite.

  - Every list view carries an explicit ORDER BY, matching InMemoryStorage
  - IntegrityError from a unique column surfaces as ConstraintViolation
  - Counters are bumped with `col = col + 1` in the UPDATE, never read-modify-write
"""
from __future__ import annotations

import structlog
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from database.errors import ConstraintViolation
from database.models import (
    AdminUserRow, AnalyticsRow, BlogPostRow, ContactInfoRow, ContactMessageRow,
    CvDataRow, NewsletterSubscriberRow, ProjectRow, ServiceRow, SiteSettingRow,
    TestimonialRow,
)
from database.session import Database
from database.store_base import BaseStorage
from models.schemas import (
    AdminUser, AdminUserCreate,
    Analytics, AnalyticsCreate, AnalyticsType,
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


def _violated_field(exc: IntegrityError, fields: tuple[str, ...]) -> str:
    """Pick the unique column named in the driver message, else the first candidate."""
    message = str(exc.orig)
    for field in fields:
        if field in message:
            return field
    return fields[0] if fields else ""


class SqlStorage(BaseStorage):
    """
    Persistent storage backed by any SQLAlchemy-supported database.
    Assumes the connection was verified and the schema created beforehand.
    """

    name = "database"

    def __init__(self, database: Database):
        self._db = database

    # ── Generic helpers ───────────────────────────────────────

    async def _get(self, row_cls, record_cls: type[R], record_id: str) -> Optional[R]:
        async with self._db.session() as db:
            row = await db.get(row_cls, record_id)
            return record_cls.model_validate(row) if row else None

    async def _first(self, record_cls: type[R], stmt) -> Optional[R]:
        async with self._db.session() as db:
            row = (await db.execute(stmt)).scalars().first()
            return record_cls.model_validate(row) if row else None

    async def _list(self, record_cls: type[R], stmt) -> list[R]:
        async with self._db.session() as db:
            result = await db.execute(stmt)
            return [record_cls.model_validate(row) for row in result.scalars()]

    async def _insert(self, row, record_cls: type[R], entity: str, *fields: str) -> R:
        try:
            async with self._db.session() as db:
                db.add(row)
                await db.flush()
                await db.refresh(row)
                return record_cls.model_validate(row)
        except IntegrityError as exc:
            field = _violated_field(exc, fields)
            logger.warning("sql_constraint_violation", entity=entity, field=field, error=str(exc.orig))
            value = vars(row).get(field, "") if field else ""
            raise ConstraintViolation(entity, field, str(value), backend=self.name) from exc

    async def _patch(self, row_cls, record_cls: type[R], record_id: str,
                     changes: dict[str, Any], entity: str, *fields: str) -> Optional[R]:
        """Shallow-merge `changes` onto one row and return the stored result."""
        try:
            async with self._db.session() as db:
                row = await db.get(row_cls, record_id)
                if row is None:
                    return None
                for key, value in changes.items():
                    setattr(row, key, value)
                row.updated_at = _utcnow()
                await db.flush()
                await db.refresh(row)
                return record_cls.model_validate(row)
        except IntegrityError as exc:
            field = _violated_field(exc, fields)
            logger.warning("sql_constraint_violation", entity=entity, field=field, error=str(exc.orig))
            raise ConstraintViolation(entity, field, str(changes.get(field, "")), backend=self.name) from exc

    async def _delete(self, row_cls, record_id: str) -> bool:
        async with self._db.session() as db:
            result = await db.execute(delete(row_cls).where(row_cls.id == record_id))
            return result.rowcount > 0

    @staticmethod
    def _by_order(row_cls):
        return select(row_cls).order_by(row_cls.order.asc(), row_cls.created_at.asc())

    # ── Admin users ───────────────────────────────────────────

    async def get_admin_user(self, user_id: str) -> Optional[AdminUser]:
        return await self._get(AdminUserRow, AdminUser, user_id)

    async def get_admin_user_by_username(self, username: str) -> Optional[AdminUser]:
        stmt = select(AdminUserRow).where(AdminUserRow.username == username)
        return await self._first(AdminUser, stmt)

    async def create_admin_user(self, data: AdminUserCreate) -> AdminUser:
        return await self._insert(
            AdminUserRow(**data.model_dump()), AdminUser, "admin_users", "username", "email",
        )

    # ── Services ──────────────────────────────────────────────

    async def get_all_services(self) -> list[Service]:
        return await self._list(Service, self._by_order(ServiceRow))

    async def get_active_services(self) -> list[Service]:
        stmt = self._by_order(ServiceRow).where(ServiceRow.is_active.is_(True))
        return await self._list(Service, stmt)

    async def get_service(self, service_id: str) -> Optional[Service]:
        return await self._get(ServiceRow, Service, service_id)

    async def create_service(self, data: ServiceCreate) -> Service:
        return await self._insert(ServiceRow(**data.model_dump()), Service, "services")

    async def update_service(self, service_id: str, patch: ServiceUpdate) -> Optional[Service]:
        return await self._patch(ServiceRow, Service, service_id, patch.changes(), "services")

    async def delete_service(self, service_id: str) -> bool:
        return await self._delete(ServiceRow, service_id)

    # ── Projects ──────────────────────────────────────────────

    async def get_all_projects(self) -> list[Project]:
        return await self._list(Project, self._by_order(ProjectRow))

    async def get_active_projects(self) -> list[Project]:
        stmt = self._by_order(ProjectRow).where(ProjectRow.is_active.is_(True))
        return await self._list(Project, stmt)

    async def get_featured_projects(self) -> list[Project]:
        stmt = self._by_order(ProjectRow).where(ProjectRow.is_featured.is_(True))
        return await self._list(Project, stmt)

    async def get_projects_by_category(self, category: str) -> list[Project]:
        stmt = self._by_order(ProjectRow).where(ProjectRow.category == category)
        return await self._list(Project, stmt)

    async def get_project(self, project_id: str) -> Optional[Project]:
        return await self._get(ProjectRow, Project, project_id)

    async def create_project(self, data: ProjectCreate) -> Project:
        return await self._insert(ProjectRow(**data.model_dump()), Project, "projects")

    async def update_project(self, project_id: str, patch: ProjectUpdate) -> Optional[Project]:
        return await self._patch(ProjectRow, Project, project_id, patch.changes(), "projects")

    async def delete_project(self, project_id: str) -> bool:
        return await self._delete(ProjectRow, project_id)

    # ── CV data ───────────────────────────────────────────────

    async def get_all_cv_data(self) -> list[CvData]:
        return await self._list(CvData, self._by_order(CvDataRow))

    async def get_cv_data_by_type(self, cv_type: str) -> list[CvData]:
        stmt = self._by_order(CvDataRow).where(CvDataRow.type == cv_type)
        return await self._list(CvData, stmt)

    async def get_cv_data_item(self, item_id: str) -> Optional[CvData]:
        return await self._get(CvDataRow, CvData, item_id)

    async def create_cv_data(self, data: CvDataCreate) -> CvData:
        return await self._insert(CvDataRow(**data.model_dump()), CvData, "cv_data")

    async def update_cv_data(self, item_id: str, patch: CvDataUpdate) -> Optional[CvData]:
        return await self._patch(CvDataRow, CvData, item_id, patch.changes(), "cv_data")

    async def delete_cv_data(self, item_id: str) -> bool:
        return await self._delete(CvDataRow, item_id)

    # ── Contact info ──────────────────────────────────────────

    async def get_all_contact_info(self) -> list[ContactInfo]:
        return await self._list(ContactInfo, self._by_order(ContactInfoRow))

    async def get_active_contact_info(self) -> list[ContactInfo]:
        stmt = self._by_order(ContactInfoRow).where(ContactInfoRow.is_active.is_(True))
        return await self._list(ContactInfo, stmt)

    async def get_contact_info(self, info_id: str) -> Optional[ContactInfo]:
        return await self._get(ContactInfoRow, ContactInfo, info_id)

    async def create_contact_info(self, data: ContactInfoCreate) -> ContactInfo:
        return await self._insert(ContactInfoRow(**data.model_dump()), ContactInfo, "contact_info")

    async def update_contact_info(self, info_id: str, patch: ContactInfoUpdate) -> Optional[ContactInfo]:
        return await self._patch(ContactInfoRow, ContactInfo, info_id, patch.changes(), "contact_info")

    async def delete_contact_info(self, info_id: str) -> bool:
        return await self._delete(ContactInfoRow, info_id)

    # ── Contact messages ──────────────────────────────────────

    async def get_all_contact_messages(self) -> list[ContactMessage]:
        stmt = select(ContactMessageRow).order_by(ContactMessageRow.created_at.desc())
        return await self._list(ContactMessage, stmt)

    async def get_contact_message(self, message_id: str) -> Optional[ContactMessage]:
        return await self._get(ContactMessageRow, ContactMessage, message_id)

    async def create_contact_message(self, data: ContactMessageCreate) -> ContactMessage:
        row = ContactMessageRow(**data.model_dump(), status=MessageStatus.UNREAD.value)
        return await self._insert(row, ContactMessage, "contact_messages")

    async def update_contact_message_status(
        self, message_id: str, status: MessageStatus | str,
    ) -> Optional[ContactMessage]:
        changes = {"status": MessageStatus(status).value}
        return await self._patch(ContactMessageRow, ContactMessage, message_id, changes, "contact_messages")

    async def delete_contact_message(self, message_id: str) -> bool:
        return await self._delete(ContactMessageRow, message_id)

    # ── Site settings ─────────────────────────────────────────

    async def get_all_site_settings(self) -> list[SiteSetting]:
        stmt = select(SiteSettingRow).order_by(SiteSettingRow.created_at.asc())
        return await self._list(SiteSetting, stmt)

    async def get_site_settings_by_category(self, category: str) -> list[SiteSetting]:
        stmt = (
            select(SiteSettingRow)
            .where(SiteSettingRow.category == category)
            .order_by(SiteSettingRow.created_at.asc())
        )
        return await self._list(SiteSetting, stmt)

    async def get_site_setting(self, key: str) -> Optional[SiteSetting]:
        stmt = select(SiteSettingRow).where(SiteSettingRow.key == key)
        return await self._first(SiteSetting, stmt)

    async def create_site_setting(self, data: SiteSettingCreate) -> SiteSetting:
        return await self._insert(
            SiteSettingRow(**data.model_dump()), SiteSetting, "site_settings", "key",
        )

    async def update_site_setting(self, key: str, value: str) -> Optional[SiteSetting]:
        async with self._db.session() as db:
            stmt = select(SiteSettingRow).where(SiteSettingRow.key == key)
            row = (await db.execute(stmt)).scalar_one_or_none()
            if row is None:
                return None
            row.value = value
            row.updated_at = _utcnow()
            await db.flush()
            return SiteSetting.model_validate(row)

    async def delete_site_setting(self, key: str) -> bool:
        async with self._db.session() as db:
            result = await db.execute(delete(SiteSettingRow).where(SiteSettingRow.key == key))
            return result.rowcount > 0

    # ── Blog posts ────────────────────────────────────────────

    @staticmethod
    def _newest_published(stmt):
        return stmt.order_by(
            BlogPostRow.published_at.desc().nulls_last(),
            BlogPostRow.created_at.desc(),
        )

    async def get_all_blog_posts(self) -> list[BlogPost]:
        stmt = select(BlogPostRow).order_by(BlogPostRow.created_at.desc())
        return await self._list(BlogPost, stmt)

    async def get_published_blog_posts(self) -> list[BlogPost]:
        stmt = self._newest_published(
            select(BlogPostRow).where(BlogPostRow.is_published.is_(True))
        )
        return await self._list(BlogPost, stmt)

    async def get_featured_blog_posts(self) -> list[BlogPost]:
        stmt = self._newest_published(
            select(BlogPostRow).where(BlogPostRow.is_featured.is_(True))
        )
        return await self._list(BlogPost, stmt)

    async def get_blog_posts_by_category(self, category: str) -> list[BlogPost]:
        stmt = self._newest_published(
            select(BlogPostRow).where(BlogPostRow.category == category)
        )
        return await self._list(BlogPost, stmt)

    async def get_blog_post(self, post_id: str) -> Optional[BlogPost]:
        return await self._get(BlogPostRow, BlogPost, post_id)

    async def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        stmt = select(BlogPostRow).where(BlogPostRow.slug == slug)
        return await self._first(BlogPost, stmt)

    async def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        return await self._insert(BlogPostRow(**data.model_dump()), BlogPost, "blog_posts", "slug")

    async def update_blog_post(self, post_id: str, patch: BlogPostUpdate) -> Optional[BlogPost]:
        return await self._patch(BlogPostRow, BlogPost, post_id, patch.changes(), "blog_posts", "slug")

    async def delete_blog_post(self, post_id: str) -> bool:
        return await self._delete(BlogPostRow, post_id)

    async def increment_blog_post_views(self, post_id: str) -> None:
        async with self._db.session() as db:
            await db.execute(
                update(BlogPostRow)
                .where(BlogPostRow.id == post_id)
                .values(view_count=BlogPostRow.view_count + 1)
            )

    # ── Testimonials ──────────────────────────────────────────

    async def get_all_testimonials(self) -> list[Testimonial]:
        return await self._list(Testimonial, self._by_order(TestimonialRow))

    async def get_published_testimonials(self) -> list[Testimonial]:
        stmt = self._by_order(TestimonialRow).where(TestimonialRow.is_published.is_(True))
        return await self._list(Testimonial, stmt)

    async def get_featured_testimonials(self) -> list[Testimonial]:
        stmt = self._by_order(TestimonialRow).where(TestimonialRow.is_featured.is_(True))
        return await self._list(Testimonial, stmt)

    async def get_testimonials_by_project(self, project_id: str) -> list[Testimonial]:
        stmt = self._by_order(TestimonialRow).where(TestimonialRow.project_id == project_id)
        return await self._list(Testimonial, stmt)

    async def get_testimonial(self, testimonial_id: str) -> Optional[Testimonial]:
        return await self._get(TestimonialRow, Testimonial, testimonial_id)

    async def create_testimonial(self, data: TestimonialCreate) -> Testimonial:
        return await self._insert(TestimonialRow(**data.model_dump()), Testimonial, "testimonials")

    async def update_testimonial(
        self, testimonial_id: str, patch: TestimonialUpdate,
    ) -> Optional[Testimonial]:
        return await self._patch(
            TestimonialRow, Testimonial, testimonial_id, patch.changes(), "testimonials",
        )

    async def delete_testimonial(self, testimonial_id: str) -> bool:
        return await self._delete(TestimonialRow, testimonial_id)

    # ── Newsletter ────────────────────────────────────────────

    async def get_all_newsletter_subscribers(self) -> list[NewsletterSubscriber]:
        stmt = select(NewsletterSubscriberRow).order_by(NewsletterSubscriberRow.subscribed_at.desc())
        return await self._list(NewsletterSubscriber, stmt)

    async def get_active_newsletter_subscribers(self) -> list[NewsletterSubscriber]:
        stmt = (
            select(NewsletterSubscriberRow)
            .where(NewsletterSubscriberRow.is_active.is_(True))
            .order_by(NewsletterSubscriberRow.subscribed_at.desc())
        )
        return await self._list(NewsletterSubscriber, stmt)

    async def get_newsletter_subscriber(self, subscriber_id: str) -> Optional[NewsletterSubscriber]:
        return await self._get(NewsletterSubscriberRow, NewsletterSubscriber, subscriber_id)

    async def get_newsletter_subscriber_by_email(self, email: str) -> Optional[NewsletterSubscriber]:
        stmt = select(NewsletterSubscriberRow).where(NewsletterSubscriberRow.email == email)
        return await self._first(NewsletterSubscriber, stmt)

    async def create_newsletter_subscriber(
        self, data: NewsletterSubscriberCreate,
    ) -> NewsletterSubscriber:
        return await self._insert(
            NewsletterSubscriberRow(**data.model_dump()),
            NewsletterSubscriber, "newsletter_subscribers", "email",
        )

    async def unsubscribe_from_newsletter(self, email: str) -> bool:
        async with self._db.session() as db:
            result = await db.execute(
                update(NewsletterSubscriberRow)
                .where(NewsletterSubscriberRow.email == email)
                .values(is_active=False, unsubscribed_at=_utcnow())
            )
            return result.rowcount > 0

    # ── Analytics ─────────────────────────────────────────────

    async def create_analytics_entry(self, data: AnalyticsCreate) -> Analytics:
        fields = data.model_dump()
        fields["metadata_"] = fields.pop("metadata")
        row = AnalyticsRow(**fields)
        return await self._insert(row, Analytics, "analytics")

    async def get_analytics_by_type(self, event_type: str, days: int = 30) -> list[Analytics]:
        since = _utcnow() - timedelta(days=days)
        stmt = (
            select(AnalyticsRow)
            .where(AnalyticsRow.type == event_type, AnalyticsRow.created_at >= since)
            .order_by(AnalyticsRow.created_at.desc())
        )
        return await self._list(Analytics, stmt)

    async def get_analytics_by_date_range(self, start: datetime, end: datetime) -> list[Analytics]:
        stmt = (
            select(AnalyticsRow)
            .where(AnalyticsRow.created_at >= start, AnalyticsRow.created_at <= end)
            .order_by(AnalyticsRow.created_at.desc())
        )
        return await self._list(Analytics, stmt)

    async def get_page_view_stats(self, days: int = 30) -> list[PageViewStat]:
        since = _utcnow() - timedelta(days=days)
        views = func.count(AnalyticsRow.id).label("views")
        stmt = (
            select(AnalyticsRow.path, views)
            .where(
                AnalyticsRow.type == AnalyticsType.PAGE_VIEW.value,
                AnalyticsRow.created_at >= since,
                AnalyticsRow.path.is_not(None),
            )
            .group_by(AnalyticsRow.path)
            .order_by(views.desc(), AnalyticsRow.path.asc())
        )
        async with self._db.session() as db:
            result = await db.execute(stmt)
            return [PageViewStat(path=path, views=count) for path, count in result.all()]

    # ── Stats ─────────────────────────────────────────────────

    async def stats(self) -> dict[str, int]:
        tables = {
            "admin_users": AdminUserRow,
            "services": ServiceRow,
            "projects": ProjectRow,
            "cv_data": CvDataRow,
            "contact_info": ContactInfoRow,
            "contact_messages": ContactMessageRow,
            "site_settings": SiteSettingRow,
            "blog_posts": BlogPostRow,
            "testimonials": TestimonialRow,
            "newsletter_subscribers": NewsletterSubscriberRow,
            "analytics": AnalyticsRow,
        }
        counts: dict[str, int] = {}
        async with self._db.session() as db:
            for name, row_cls in tables.items():
                counts[name] = await db.scalar(select(func.count()).select_from(row_cls))
        return counts
