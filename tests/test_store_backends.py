"""
Tests for both storage backends.

Covers:
  - InMemoryStorage (seed, CRUD, ordering, stubs for database-only entities)
  - SqlStorage (via SQLite for test portability)
  - Equivalence: same inputs, same observable results
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from database.errors import ConstraintViolation, NotImplementedInMemory
from models import schemas
from models.schemas import (
    AdminUserCreate, AnalyticsCreate, BlogPostCreate, BlogPostUpdate,
    ContactInfoCreate, CvDataCreate, CvDataUpdate, NewsletterSubscriberCreate,
    ProjectCreate, ProjectUpdate, ServiceCreate, ServiceUpdate, SiteSettingCreate,
)


# ──────────────────────────────────────────────────────────────
#  InMemoryStorage
# ──────────────────────────────────────────────────────────────

class TestInMemorySeed:
    @pytest.mark.asyncio
    async def test_seeded_on_construction(self, memory_store):
        counts = await memory_store.stats()
        assert counts["admin_users"] == 1
        assert counts["services"] == 3
        assert counts["projects"] == 1
        assert counts["contact_info"] == 3
        assert counts["cv_data"] == 3
        assert counts["site_settings"] == 4
        assert counts["contact_messages"] == 0

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, memory_store):
        memory_store.seed_defaults()
        memory_store.seed_defaults()
        counts = await memory_store.stats()
        assert counts["services"] == 3
        assert counts["admin_users"] == 1

    @pytest.mark.asyncio
    async def test_unseeded_store_is_empty(self, empty_memory_store):
        assert await empty_memory_store.get_all_services() == []
        empty_memory_store.seed_defaults()
        assert len(await empty_memory_store.get_all_services()) == 3

    @pytest.mark.asyncio
    async def test_seed_admin_password_is_hashed(self, memory_store):
        from database.seed import verify_password
        admin = await memory_store.get_admin_user_by_username("admin")
        assert admin is not None
        assert admin.password != "admin123"
        assert verify_password("admin123", admin.password)

    def test_unreadable_hash_does_not_verify(self):
        from database.seed import verify_password
        bcrypt_hash = "$2b$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"
        assert verify_password("admin123", bcrypt_hash) is False
        assert verify_password("admin123", "plain-text") is False


class TestInMemoryStorage:
    @pytest.mark.asyncio
    async def test_create_and_get_service(self, memory_store, sample_service):
        created = await memory_store.create_service(sample_service)
        fetched = await memory_store.get_service(created.id)
        assert fetched == created
        assert fetched.features == ["Cloud", "DevOps"]
        assert fetched.features_en == []

    @pytest.mark.asyncio
    async def test_services_sorted_by_order(self, memory_store):
        await memory_store.create_service(ServiceCreate(title="first", icon="x", order=0))
        services = await memory_store.get_all_services()
        assert [s.order for s in services] == [0, 1, 2, 3]
        assert services[0].title == "first"

    @pytest.mark.asyncio
    async def test_order_ties_keep_creation_order(self, empty_memory_store):
        for title in ("a", "b", "c"):
            await empty_memory_store.create_service(ServiceCreate(title=title, icon="x", order=1))
        services = await empty_memory_store.get_all_services()
        assert [s.title for s in services] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_active_filter(self, memory_store):
        await memory_store.create_service(ServiceCreate(title="hidden", icon="x", is_active=False))
        active = await memory_store.get_active_services()
        assert "hidden" not in [s.title for s in active]
        assert len(active) == 3

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, memory_store):
        services = await memory_store.get_all_services()
        services[0].features.append("mutated")
        services[0].title = "mutated"
        again = await memory_store.get_service(services[0].id)
        assert again.title != "mutated"
        assert "mutated" not in again.features

    @pytest.mark.asyncio
    async def test_partial_update_merges(self, memory_store, sample_service):
        created = await memory_store.create_service(sample_service)
        updated = await memory_store.update_service(created.id, ServiceUpdate(color="red"))
        assert updated.color == "red"
        assert updated.title == sample_service.title
        assert updated.features == ["Cloud", "DevOps"]
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, memory_store):
        assert await memory_store.update_service("nope", ServiceUpdate(title="x")) is None

    @pytest.mark.asyncio
    async def test_delete(self, memory_store, sample_service):
        created = await memory_store.create_service(sample_service)
        assert await memory_store.delete_service(created.id) is True
        assert await memory_store.get_service(created.id) is None
        assert await memory_store.delete_service(created.id) is False

    @pytest.mark.asyncio
    async def test_projects_views(self, memory_store):
        await memory_store.create_project(ProjectCreate(title="App", description="d", category="mobile"))
        featured = await memory_store.get_featured_projects()
        assert [p.title_en for p in featured] == ["Personal Company Website"]
        mobile = await memory_store.get_projects_by_category("mobile")
        assert [p.title for p in mobile] == ["App"]

    @pytest.mark.asyncio
    async def test_cv_by_type(self, memory_store):
        skills = await memory_store.get_cv_data_by_type("skill")
        assert [s.title_en for s in skills] == ["React", "Node.js"]
        assert skills[0].level == 5

    @pytest.mark.asyncio
    async def test_duplicate_admin_username_rejected(self, memory_store):
        with pytest.raises(ConstraintViolation) as exc_info:
            await memory_store.create_admin_user(
                AdminUserCreate(username="admin", email="other@x.com", password="h")
            )
        assert exc_info.value.field == "username"

    @pytest.mark.asyncio
    async def test_duplicate_setting_key_rejected(self, memory_store):
        with pytest.raises(ConstraintViolation):
            await memory_store.create_site_setting(SiteSettingCreate(key="site_name", value="x"))

    @pytest.mark.asyncio
    async def test_site_setting_by_key(self, memory_store):
        updated = await memory_store.update_site_setting("theme_color", "#000000")
        assert updated.value == "#000000"
        assert (await memory_store.get_site_setting("theme_color")).value == "#000000"
        assert await memory_store.update_site_setting("missing", "x") is None
        assert await memory_store.delete_site_setting("theme_color") is True
        assert await memory_store.delete_site_setting("theme_color") is False

    @pytest.mark.asyncio
    async def test_settings_keep_creation_order(self, memory_store):
        keys = [s.key for s in await memory_store.get_all_site_settings()]
        assert keys == ["site_name", "site_description", "theme_color", "contact_email"]
        general = await memory_store.get_site_settings_by_category("general")
        assert [s.key for s in general] == ["site_name", "site_description"]

    @pytest.mark.asyncio
    async def test_contact_messages_newest_first(self, memory_store, sample_message):
        first = await memory_store.create_contact_message(sample_message)
        second = await memory_store.create_contact_message(sample_message)
        messages = await memory_store.get_all_contact_messages()
        assert [m.id for m in messages] == [second.id, first.id]
        assert messages[0].status == "unread"

    @pytest.mark.asyncio
    async def test_message_status_update(self, memory_store, sample_message):
        message = await memory_store.create_contact_message(sample_message)
        updated = await memory_store.update_contact_message_status(message.id, "read")
        assert updated.status == "read"
        with pytest.raises(ValueError):
            await memory_store.update_contact_message_status(message.id, "archived")


class TestInMemoryDatabaseOnlyEntities:
    @pytest.mark.asyncio
    async def test_reads_are_empty(self, memory_store):
        assert await memory_store.get_all_blog_posts() == []
        assert await memory_store.get_published_blog_posts() == []
        assert await memory_store.get_blog_post_by_slug("x") is None
        assert await memory_store.get_all_testimonials() == []
        assert await memory_store.get_testimonials_by_project("p") == []
        assert await memory_store.get_all_newsletter_subscribers() == []
        assert await memory_store.get_newsletter_subscriber_by_email("a@b.com") is None
        assert await memory_store.get_analytics_by_type("page_view") == []
        assert await memory_store.get_page_view_stats() == []

    @pytest.mark.asyncio
    async def test_creates_raise_not_implemented(self, memory_store):
        with pytest.raises(NotImplementedInMemory):
            await memory_store.create_blog_post(BlogPostCreate(title="t", slug="t", content="c"))
        with pytest.raises(NotImplementedInMemory):
            await memory_store.create_testimonial(
                schemas.TestimonialCreate(client_name="a", testimonial="b")
            )
        with pytest.raises(NotImplementedInMemory):
            await memory_store.create_newsletter_subscriber(NewsletterSubscriberCreate(email="a@b.com"))
        with pytest.raises(NotImplementedError):
            await memory_store.create_analytics_entry(AnalyticsCreate(type="page_view"))

    @pytest.mark.asyncio
    async def test_mutations_report_missing(self, memory_store):
        assert await memory_store.update_blog_post("x", BlogPostUpdate(title="t")) is None
        assert await memory_store.delete_blog_post("x") is False
        assert await memory_store.unsubscribe_from_newsletter("a@b.com") is False
        assert await memory_store.increment_blog_post_views("x") is None


# ──────────────────────────────────────────────────────────────
#  SqlStorage (SQLite)
# ──────────────────────────────────────────────────────────────

class TestSqlStorage:
    @pytest.mark.asyncio
    async def test_create_and_get_service(self, sql_store, sample_service):
        created = await sql_store.create_service(sample_service)
        fetched = await sql_store.get_service(created.id)
        assert fetched.title == sample_service.title
        assert fetched.features == ["Cloud", "DevOps"]
        assert fetched.features_en == []
        assert fetched.is_active is True

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, sql_store):
        assert await sql_store.get_service("missing") is None
        assert await sql_store.get_admin_user_by_username("nobody") is None

    @pytest.mark.asyncio
    async def test_ordering_with_ties(self, sql_store):
        for title, order in (("b", 2), ("a1", 1), ("a2", 1), ("z", 0)):
            await sql_store.create_service(ServiceCreate(title=title, icon="x", order=order))
        services = await sql_store.get_all_services()
        assert [s.title for s in services] == ["z", "a1", "a2", "b"]

    @pytest.mark.asyncio
    async def test_partial_update(self, sql_store, sample_service):
        created = await sql_store.create_service(sample_service)
        updated = await sql_store.update_service(
            created.id, ServiceUpdate(color="red", features=None),
        )
        assert updated.color == "red"
        assert updated.features == []
        assert updated.title == sample_service.title
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_and_delete_missing(self, sql_store):
        assert await sql_store.update_project("missing", ProjectUpdate(title="x")) is None
        assert await sql_store.delete_project("missing") is False

    @pytest.mark.asyncio
    async def test_delete(self, sql_store, sample_service):
        created = await sql_store.create_service(sample_service)
        assert await sql_store.delete_service(created.id) is True
        assert await sql_store.get_service(created.id) is None

    @pytest.mark.asyncio
    async def test_duplicate_username_is_constraint_violation(self, sql_store):
        user = AdminUserCreate(username="root", email="root@x.com", password="h")
        await sql_store.create_admin_user(user)
        with pytest.raises(ConstraintViolation) as exc_info:
            await sql_store.create_admin_user(user)
        assert exc_info.value.field == "username"
        assert exc_info.value.value == "root"

    @pytest.mark.asyncio
    async def test_duplicate_admin_email_names_the_column(self, sql_store):
        await sql_store.create_admin_user(AdminUserCreate(username="root", email="root@x.com", password="h"))
        with pytest.raises(ConstraintViolation) as exc_info:
            await sql_store.create_admin_user(AdminUserCreate(username="other", email="root@x.com", password="h"))
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_duplicate_slug_is_constraint_violation(self, sql_store):
        post = BlogPostCreate(title="t", slug="hello", content="c")
        await sql_store.create_blog_post(post)
        with pytest.raises(ConstraintViolation) as exc_info:
            await sql_store.create_blog_post(post)
        assert exc_info.value.entity == "blog_posts"
        assert exc_info.value.field == "slug"

    @pytest.mark.asyncio
    async def test_slug_update_collision(self, sql_store):
        await sql_store.create_blog_post(BlogPostCreate(title="a", slug="a", content="c"))
        b = await sql_store.create_blog_post(BlogPostCreate(title="b", slug="b", content="c"))
        with pytest.raises(ConstraintViolation) as exc_info:
            await sql_store.update_blog_post(b.id, BlogPostUpdate(slug="a"))
        assert exc_info.value.field == "slug"
        assert exc_info.value.value == "a"

    @pytest.mark.asyncio
    async def test_duplicate_setting_key(self, sql_store):
        await sql_store.create_site_setting(SiteSettingCreate(key="k", value="1"))
        with pytest.raises(ConstraintViolation):
            await sql_store.create_site_setting(SiteSettingCreate(key="k", value="2"))

    @pytest.mark.asyncio
    async def test_site_settings_by_key(self, sql_store):
        await sql_store.create_site_setting(SiteSettingCreate(key="k", value="1", category="c"))
        assert (await sql_store.update_site_setting("k", "2")).value == "2"
        assert await sql_store.update_site_setting("other", "2") is None
        assert [s.key for s in await sql_store.get_site_settings_by_category("c")] == ["k"]
        assert await sql_store.delete_site_setting("k") is True
        assert await sql_store.get_site_setting("k") is None

    @pytest.mark.asyncio
    async def test_cv_data(self, sql_store):
        item = await sql_store.create_cv_data(CvDataCreate(type="skill", title="Go", level=3))
        await sql_store.create_cv_data(CvDataCreate(type="education", title="BSc"))
        skills = await sql_store.get_cv_data_by_type("skill")
        assert [s.id for s in skills] == [item.id]
        updated = await sql_store.update_cv_data(item.id, CvDataUpdate(level=4, skills=["gRPC"]))
        assert updated.level == 4
        assert updated.skills == ["gRPC"]
        assert updated.type == "skill"

    @pytest.mark.asyncio
    async def test_contact_info_active(self, sql_store):
        await sql_store.create_contact_info(
            ContactInfoCreate(type="email", label="Email", value="a@b.com", icon="Mail")
        )
        await sql_store.create_contact_info(
            ContactInfoCreate(type="phone", label="Phone", value="1", icon="Phone", is_active=False)
        )
        assert len(await sql_store.get_all_contact_info()) == 2
        assert [c.type for c in await sql_store.get_active_contact_info()] == ["email"]

    @pytest.mark.asyncio
    async def test_contact_messages(self, sql_store, sample_message):
        first = await sql_store.create_contact_message(sample_message)
        second = await sql_store.create_contact_message(sample_message)
        messages = await sql_store.get_all_contact_messages()
        assert [m.id for m in messages] == [second.id, first.id]
        updated = await sql_store.update_contact_message_status(first.id, schemas.MessageStatus.REPLIED)
        assert updated.status == "replied"
        assert await sql_store.delete_contact_message(first.id) is True


class TestSqlBlogAndTestimonials:
    @pytest.mark.asyncio
    async def test_published_views_newest_first_nulls_last(self, sql_store):
        now = datetime.now(timezone.utc)
        await sql_store.create_blog_post(BlogPostCreate(
            title="old", slug="old", content="c", is_published=True,
            published_at=now - timedelta(days=3),
        ))
        await sql_store.create_blog_post(BlogPostCreate(
            title="new", slug="new", content="c", is_published=True, published_at=now,
        ))
        await sql_store.create_blog_post(BlogPostCreate(
            title="undated", slug="undated", content="c", is_published=True,
        ))
        await sql_store.create_blog_post(BlogPostCreate(title="draft", slug="draft", content="c"))

        published = await sql_store.get_published_blog_posts()
        assert [p.slug for p in published] == ["new", "old", "undated"]
        all_posts = await sql_store.get_all_blog_posts()
        assert [p.slug for p in all_posts] == ["draft", "undated", "new", "old"]

    @pytest.mark.asyncio
    async def test_offset_datetimes_round_trip_as_utc(self, sql_store):
        riyadh = timezone(timedelta(hours=3))
        published = datetime(2026, 1, 1, 12, 0, tzinfo=riyadh)
        post = await sql_store.create_blog_post(BlogPostCreate(
            title="t", slug="t", content="c", is_published=True, published_at=published,
        ))

        fetched = await sql_store.get_blog_post(post.id)
        assert fetched.published_at == published
        assert fetched.published_at.utcoffset() == timedelta(0)
        assert fetched.published_at.hour == 9
        assert fetched.created_at.tzinfo is not None
        assert fetched.updated_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_featured_and_category(self, sql_store):
        await sql_store.create_blog_post(BlogPostCreate(
            title="a", slug="a", content="c", category="tech", is_featured=True,
        ))
        await sql_store.create_blog_post(BlogPostCreate(title="b", slug="b", content="c"))
        assert [p.slug for p in await sql_store.get_featured_blog_posts()] == ["a"]
        assert [p.slug for p in await sql_store.get_blog_posts_by_category("tech")] == ["a"]
        assert (await sql_store.get_blog_post_by_slug("b")).category == "general"

    @pytest.mark.asyncio
    async def test_increment_views(self, sql_store):
        post = await sql_store.create_blog_post(BlogPostCreate(title="t", slug="t", content="c"))
        assert post.view_count == 0
        await sql_store.increment_blog_post_views(post.id)
        await sql_store.increment_blog_post_views(post.id)
        assert (await sql_store.get_blog_post(post.id)).view_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, sql_store):
        post = await sql_store.create_blog_post(BlogPostCreate(title="t", slug="t", content="c"))
        await asyncio.gather(*(sql_store.increment_blog_post_views(post.id) for _ in range(8)))
        assert (await sql_store.get_blog_post(post.id)).view_count == 8

    @pytest.mark.asyncio
    async def test_increment_missing_post_is_noop(self, sql_store):
        await sql_store.increment_blog_post_views("missing")

    @pytest.mark.asyncio
    async def test_testimonials(self, sql_store):
        project = await sql_store.create_project(ProjectCreate(title="p", description="d"))
        await sql_store.create_testimonial(schemas.TestimonialCreate(
            client_name="b", testimonial="ok", project_id=project.id, order=2,
        ))
        await sql_store.create_testimonial(schemas.TestimonialCreate(
            client_name="a", testimonial="great", order=1, is_featured=True,
        ))
        await sql_store.create_testimonial(schemas.TestimonialCreate(
            client_name="hidden", testimonial="meh", is_published=False,
        ))
        assert [t.client_name for t in await sql_store.get_published_testimonials()] == ["a", "b"]
        assert [t.client_name for t in await sql_store.get_featured_testimonials()] == ["a"]
        assert [t.client_name for t in await sql_store.get_testimonials_by_project(project.id)] == ["b"]
        assert [t.client_name for t in await sql_store.get_all_testimonials()] == ["hidden", "a", "b"]


class TestSqlNewsletterAndAnalytics:
    @pytest.mark.asyncio
    async def test_subscribe_and_unsubscribe(self, sql_store):
        sub = await sql_store.create_newsletter_subscriber(NewsletterSubscriberCreate(email="a@b.com"))
        assert sub.is_active is True
        with pytest.raises(ConstraintViolation):
            await sql_store.create_newsletter_subscriber(NewsletterSubscriberCreate(email="a@b.com"))

        assert await sql_store.unsubscribe_from_newsletter("a@b.com") is True
        assert await sql_store.unsubscribe_from_newsletter("nobody@b.com") is False
        stored = await sql_store.get_newsletter_subscriber_by_email("a@b.com")
        assert stored.is_active is False
        assert stored.unsubscribed_at is not None
        assert await sql_store.get_active_newsletter_subscribers() == []
        assert len(await sql_store.get_all_newsletter_subscribers()) == 1

    @pytest.mark.asyncio
    async def test_analytics_entry_roundtrip(self, sql_store):
        entry = await sql_store.create_analytics_entry(
            AnalyticsCreate(type="project_view", path="/projects/1", metadata={"ref": "home"})
        )
        assert entry.metadata == {"ref": "home"}
        by_type = await sql_store.get_analytics_by_type("project_view")
        assert [e.id for e in by_type] == [entry.id]
        assert await sql_store.get_analytics_by_type("download") == []

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive_window(self, sql_store):
        entry = await sql_store.create_analytics_entry(AnalyticsCreate(type="page_view", path="/"))
        now = datetime.now(timezone.utc)
        inside = await sql_store.get_analytics_by_date_range(now - timedelta(hours=1), now + timedelta(hours=1))
        assert [e.id for e in inside] == [entry.id]
        before = await sql_store.get_analytics_by_date_range(now - timedelta(days=3), now - timedelta(days=2))
        assert before == []

    @pytest.mark.asyncio
    async def test_date_range_honours_offsets(self, sql_store):
        entry = await sql_store.create_analytics_entry(AnalyticsCreate(type="page_view", path="/"))
        assert entry.created_at.utcoffset() == timedelta(0)

        now = datetime.now(timezone(timedelta(hours=5)))
        inside = await sql_store.get_analytics_by_date_range(
            now - timedelta(minutes=30), now + timedelta(minutes=30),
        )
        assert [e.id for e in inside] == [entry.id]
        later = await sql_store.get_analytics_by_date_range(
            now + timedelta(minutes=30), now + timedelta(hours=2),
        )
        assert later == []

    @pytest.mark.asyncio
    async def test_page_view_stats(self, sql_store):
        for path in ("/", "/about", "/", "/blog", "/about", "/"):
            await sql_store.create_analytics_entry(AnalyticsCreate(type="page_view", path=path))
        await sql_store.create_analytics_entry(AnalyticsCreate(type="page_view"))
        await sql_store.create_analytics_entry(AnalyticsCreate(type="download", path="/"))

        stats = await sql_store.get_page_view_stats(days=7)
        assert [(s.path, s.views) for s in stats] == [("/", 3), ("/about", 2), ("/blog", 1)]

    @pytest.mark.asyncio
    async def test_stats_counts_every_table(self, sql_store, sample_message):
        await sql_store.create_contact_message(sample_message)
        counts = await sql_store.stats()
        assert counts["contact_messages"] == 1
        assert counts["services"] == 0
        assert len(counts) == 11


# ──────────────────────────────────────────────────────────────
#  Equivalence
# ──────────────────────────────────────────────────────────────

def _shape(records) -> list[dict]:
    """Comparable view of records: everything except server-assigned fields."""
    ignored = {"id", "created_at", "updated_at", "password"}
    return [
        {k: v for k, v in r.model_dump().items() if k not in ignored}
        for r in records
    ]


class TestBackendEquivalence:
    """Seeded memory and seeded SQLite give the same answers for the same calls."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,args", [
        ("get_all_services", ()),
        ("get_active_services", ()),
        ("get_all_projects", ()),
        ("get_active_projects", ()),
        ("get_featured_projects", ()),
        ("get_projects_by_category", ("web",)),
        ("get_all_cv_data", ()),
        ("get_cv_data_by_type", ("skill",)),
        ("get_cv_data_by_type", ("education",)),
        ("get_all_contact_info", ()),
        ("get_active_contact_info", ()),
        ("get_all_site_settings", ()),
        ("get_site_settings_by_category", ("general",)),
        ("get_all_contact_messages", ()),
    ])
    async def test_seeded_reads_match(self, memory_store, seeded_sql_store, method, args):
        from_memory = await getattr(memory_store, method)(*args)
        from_sql = await getattr(seeded_sql_store, method)(*args)
        assert _shape(from_memory) == _shape(from_sql)

    @pytest.mark.asyncio
    async def test_same_writes_same_views(self, memory_store, seeded_sql_store):
        for store in (memory_store, seeded_sql_store):
            created = await store.create_service(ServiceCreate(title="x", icon="i", order=2))
            await store.update_service(created.id, ServiceUpdate(features=["a"], is_active=False))
            await store.create_site_setting(SiteSettingCreate(key="lang", value="ar"))

        assert _shape(await memory_store.get_all_services()) == _shape(await seeded_sql_store.get_all_services())
        assert _shape(await memory_store.get_active_services()) == _shape(await seeded_sql_store.get_active_services())
        assert _shape(await memory_store.get_all_site_settings()) == \
            _shape(await seeded_sql_store.get_all_site_settings())

    @pytest.mark.asyncio
    async def test_admin_lookup_matches(self, memory_store, seeded_sql_store):
        mem_admin = await memory_store.get_admin_user_by_username("admin")
        sql_admin = await seeded_sql_store.get_admin_user_by_username("admin")
        assert mem_admin.email == sql_admin.email
        assert await memory_store.get_admin_user_by_username("ghost") is None
        assert await seeded_sql_store.get_admin_user_by_username("ghost") is None
