"""
Tests for the HTTP layer:
- Health reporting in memory and database mode
- Public content routes
- Admin authentication and CRUD
- Error mapping (404 / 409 / 422 / 501)
"""
import pytest
from fastapi.testclient import TestClient


# ══════════════════════════════════════════════════════════════
#  Fixtures
# ══════════════════════════════════════════════════════════════

@pytest.fixture
def memory_client(memory_settings):
    from api.main import create_app
    with TestClient(create_app(memory_settings)) as client:
        yield client


@pytest.fixture
def sql_client(sql_settings):
    from api.main import create_app
    with TestClient(create_app(sql_settings)) as client:
        yield client


def _login(client: TestClient) -> dict:
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


# ══════════════════════════════════════════════════════════════
#  Health
# ══════════════════════════════════════════════════════════════

class TestHealth:

    def test_memory_mode_is_degraded(self, memory_client):
        for path in ("/health", "/api/health"):
            body = memory_client.get(path).json()
            assert body["status"] == "degraded"
            assert body["usingDatabase"] is False
            assert body["storageType"] == "Memory (In-Memory)"
            assert "timestamp" in body

    def test_database_mode_is_healthy(self, sql_client):
        body = sql_client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["usingDatabase"] is True
        assert body["message"] == "Connected to database storage"


# ══════════════════════════════════════════════════════════════
#  Public Routes (memory mode)
# ══════════════════════════════════════════════════════════════

class TestPublicRoutes:

    def test_services(self, memory_client):
        services = memory_client.get("/api/services").json()
        assert [s["order"] for s in services] == [1, 2, 3]
        assert services[0]["title_en"] == "Web Development"
        assert "features_en" in services[0]

    def test_projects_filters(self, memory_client):
        assert len(memory_client.get("/api/projects").json()) == 1
        assert len(memory_client.get("/api/projects", params={"featured": "true"}).json()) == 1
        assert memory_client.get("/api/projects", params={"category": "mobile"}).json() == []

    def test_project_not_found(self, memory_client):
        assert memory_client.get("/api/projects/missing").status_code == 404

    def test_cv_by_type(self, memory_client):
        skills = memory_client.get("/api/cv/skill").json()
        assert [s["title"] for s in skills] == ["React", "Node.js"]
        assert memory_client.get("/api/cv/hobbies").status_code == 422

    def test_contact_info(self, memory_client):
        info = memory_client.get("/api/contact-info").json()
        assert [i["type"] for i in info] == ["email", "phone", "address"]

    def test_settings(self, memory_client):
        assert memory_client.get("/api/settings/theme_color").json()["value"] == "#3B82F6"
        general = memory_client.get("/api/settings", params={"category": "general"}).json()
        assert len(general) == 2
        assert memory_client.get("/api/settings/missing").status_code == 404

    def test_contact_form(self, memory_client):
        resp = memory_client.post("/api/contact", json={
            "name": "Sara", "email": "sara@example.com",
            "subject": "Quote", "message": "Hello",
        })
        assert resp.status_code == 201
        assert resp.json()["id"]

    def test_contact_form_validation(self, memory_client):
        resp = memory_client.post("/api/contact", json={"name": "Sara"})
        assert resp.status_code == 422

    def test_database_only_reads_are_empty(self, memory_client):
        assert memory_client.get("/api/blog").json() == []
        assert memory_client.get("/api/testimonials").json() == []
        assert memory_client.get("/api/blog/anything").status_code == 404

    def test_search_short_query_is_empty(self, memory_client):
        assert memory_client.get("/api/search").json() == []
        assert memory_client.get("/api/search", params={"q": "w"}).json() == []

    def test_search_matches_projects_case_insensitively(self, memory_client):
        hits = memory_client.get("/api/search", params={"q": "PERSONAL"}).json()
        assert [(h["type"], h["title_en"]) for h in hits] == [("project", "Personal Company Website")]
        assert hits[0]["url"] == f"/projects/{hits[0]['id']}"
        assert hits[0]["excerpt_en"] == "Responsive personal website"

    def test_search_filters(self, memory_client):
        assert memory_client.get("/api/search", params={"q": "web", "type": "blog"}).json() == []
        assert memory_client.get("/api/search", params={"q": "web", "category": "mobile"}).json() == []
        assert len(memory_client.get("/api/search", params={"q": "web", "category": "all"}).json()) == 1
        assert memory_client.get("/api/search", params={"q": "web", "limit": 0}).status_code == 422
        assert memory_client.get("/api/search", params={"q": "web", "type": "video"}).status_code == 422

    def test_database_only_writes_are_501(self, memory_client):
        resp = memory_client.post("/api/newsletter/subscribe", json={"email": "a@b.com"})
        assert resp.status_code == 501
        assert resp.json()["operation"] == "create_newsletter_subscriber"
        assert memory_client.post("/api/analytics", json={"type": "page_view", "path": "/"}).status_code == 501


# ══════════════════════════════════════════════════════════════
#  Admin (memory mode)
# ══════════════════════════════════════════════════════════════

class TestAdminAuth:

    def test_login_returns_token_and_user(self, memory_client):
        resp = memory_client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
        body = resp.json()
        assert body["token"]
        assert body["user"]["username"] == "admin"
        assert "password" not in body["user"]

    def test_wrong_password(self, memory_client):
        resp = memory_client.post("/api/admin/login", json={"username": "admin", "password": "nope"})
        assert resp.status_code == 401

    def test_unknown_user(self, memory_client):
        resp = memory_client.post("/api/admin/login", json={"username": "ghost", "password": "x"})
        assert resp.status_code == 401

    def test_foreign_password_hash_is_401(self, memory_client):
        import asyncio
        from models.schemas import AdminUserCreate

        storage = memory_client.app.state.storage
        asyncio.run(storage.create_admin_user(AdminUserCreate(
            username="legacy", email="legacy@example.com",
            password="$2b$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy",
        )))
        resp = memory_client.post("/api/admin/login", json={"username": "legacy", "password": "x"})
        assert resp.status_code == 401

    def test_missing_token(self, memory_client):
        assert memory_client.get("/api/admin/services").status_code == 401

    def test_invalid_token(self, memory_client):
        resp = memory_client.get("/api/admin/services", headers={"Authorization": "Bearer junk"})
        assert resp.status_code == 403


class TestAdminContent:

    @pytest.fixture
    def auth(self, memory_client):
        return _login(memory_client)

    def test_service_crud(self, memory_client, auth):
        created = memory_client.post("/api/admin/services", headers=auth, json={
            "title": "Cloud", "icon": "Cloud", "order": 4,
        })
        assert created.status_code == 201
        service_id = created.json()["id"]
        assert created.json()["color"] == "blue"

        updated = memory_client.put(f"/api/admin/services/{service_id}", headers=auth, json={"color": "red"})
        assert updated.json()["color"] == "red"
        assert updated.json()["title"] == "Cloud"

        assert len(memory_client.get("/api/admin/services", headers=auth).json()) == 4
        assert memory_client.delete(f"/api/admin/services/{service_id}", headers=auth).status_code == 200
        assert memory_client.delete(f"/api/admin/services/{service_id}", headers=auth).status_code == 404

    def test_update_missing_is_404(self, memory_client, auth):
        resp = memory_client.put("/api/admin/projects/missing", headers=auth, json={"title": "x"})
        assert resp.status_code == 404

    def test_null_required_field_is_422(self, memory_client, auth):
        service_id = memory_client.get("/api/services").json()[0]["id"]
        resp = memory_client.put(f"/api/admin/services/{service_id}", headers=auth, json={"title": None})
        assert resp.status_code == 422

    def test_duplicate_setting_is_409(self, memory_client, auth):
        resp = memory_client.post("/api/admin/settings", headers=auth, json={"key": "site_name", "value": "x"})
        assert resp.status_code == 409
        assert resp.json()["entity"] == "site_settings"

    def test_update_setting(self, memory_client, auth):
        resp = memory_client.put("/api/admin/settings/theme_color", headers=auth, json={"value": "#111111"})
        assert resp.json()["value"] == "#111111"

    def test_message_status(self, memory_client, auth):
        memory_client.post("/api/contact", json={
            "name": "Sara", "email": "sara@example.com", "subject": "Quote", "message": "Hello",
        })
        messages = memory_client.get("/api/admin/messages", headers=auth).json()
        assert len(messages) == 1
        message_id = messages[0]["id"]

        resp = memory_client.put(f"/api/admin/messages/{message_id}/status", headers=auth, json={"status": "read"})
        assert resp.json()["status"] == "read"
        bad = memory_client.put(f"/api/admin/messages/{message_id}/status", headers=auth, json={"status": "gone"})
        assert bad.status_code == 422

    def test_blog_create_is_501_in_memory(self, memory_client, auth):
        resp = memory_client.post("/api/admin/blog", headers=auth, json={
            "title": "t", "slug": "t", "content": "c",
        })
        assert resp.status_code == 501

    def test_db_stats_and_reconnect(self, memory_client, auth):
        stats = memory_client.get("/api/admin/db-stats", headers=auth).json()
        assert stats["state"] == "memory_active"
        assert stats["counts"]["services"] == 3
        assert stats["storage"]["usingDatabase"] is False

        resp = memory_client.post("/api/admin/reconnect", headers=auth).json()
        assert resp["success"] is False
        assert resp["status"] == "degraded"


# ══════════════════════════════════════════════════════════════
#  Database Mode (SQLite)
# ══════════════════════════════════════════════════════════════

class TestDatabaseMode:

    @pytest.fixture
    def auth(self, sql_client):
        return _login(sql_client)

    def test_seeded_content_served(self, sql_client):
        services = sql_client.get("/api/services").json()
        assert [s["title_en"] for s in services] == [
            "Web Development", "Mobile Applications", "Database Management",
        ]

    def test_blog_lifecycle(self, sql_client, auth):
        resp = sql_client.post("/api/admin/blog", headers=auth, json={
            "title": "مرحبا", "title_en": "Hello", "slug": "hello", "content": "...",
            "is_published": True, "published_at": "2026-01-01T00:00:00Z", "tags": ["intro"],
        })
        assert resp.status_code == 201
        dup = sql_client.post("/api/admin/blog", headers=auth, json={
            "title": "x", "slug": "hello", "content": "...",
        })
        assert dup.status_code == 409
        assert dup.json()["field"] == "slug"

        first = sql_client.get("/api/blog/hello").json()
        second = sql_client.get("/api/blog/hello").json()
        assert second["view_count"] == first["view_count"] + 1
        assert [p["slug"] for p in sql_client.get("/api/blog").json()] == ["hello"]

    def test_unpublished_post_hidden(self, sql_client, auth):
        sql_client.post("/api/admin/blog", headers=auth, json={"title": "d", "slug": "draft", "content": "c"})
        assert sql_client.get("/api/blog/draft").status_code == 404
        assert len(sql_client.get("/api/admin/blog", headers=auth).json()) == 1

    def test_testimonials(self, sql_client, auth):
        sql_client.post("/api/admin/testimonials", headers=auth, json={
            "client_name": "Omar", "testimonial": "Excellent", "is_featured": True,
        })
        assert sql_client.post("/api/admin/testimonials", headers=auth, json={
            "client_name": "Omar", "testimonial": "Excellent", "rating": 7,
        }).status_code == 422
        featured = sql_client.get("/api/testimonials", params={"featured": "true"}).json()
        assert [t["client_name"] for t in featured] == ["Omar"]
        assert featured[0]["rating"] == 5

    def test_newsletter(self, sql_client, auth):
        assert sql_client.post("/api/newsletter/subscribe", json={"email": "a@b.com"}).status_code == 201
        assert sql_client.post("/api/newsletter/subscribe", json={"email": "a@b.com"}).status_code == 409
        assert sql_client.post("/api/newsletter/unsubscribe", json={"email": "a@b.com"}).status_code == 200
        assert sql_client.post("/api/newsletter/unsubscribe", json={"email": "x@b.com"}).status_code == 404
        assert sql_client.get("/api/admin/newsletter", headers=auth, params={"active": "true"}).json() == []

    def test_analytics(self, sql_client, auth):
        for path in ("/", "/", "/about"):
            assert sql_client.post("/api/analytics", json={"type": "page_view", "path": path}).status_code == 201
        stats = sql_client.get("/api/admin/analytics", headers=auth).json()
        assert stats == [{"path": "/", "views": 2}, {"path": "/about", "views": 1}]
        by_type = sql_client.get("/api/admin/analytics", headers=auth, params={"type": "page_view"}).json()
        assert len(by_type) == 3

    def test_reconnect_while_active(self, sql_client, auth):
        resp = sql_client.post("/api/admin/reconnect", headers=auth).json()
        assert resp["success"] is True
        assert resp["usingDatabase"] is True
        counts = sql_client.get("/api/admin/db-stats", headers=auth).json()["counts"]
        assert counts["services"] == 3

    def test_search_across_content(self, sql_client, auth):
        sql_client.post("/api/admin/blog", headers=auth, json={
            "title": "مقال", "title_en": "Building Web Apps", "slug": "web-apps", "content": "...",
            "category": "tech", "tags_en": ["react"], "is_published": True,
        })
        sql_client.post("/api/admin/blog", headers=auth, json={
            "title": "مسودة", "title_en": "Web draft", "slug": "web-draft", "content": "...",
        })
        sql_client.post("/api/admin/testimonials", headers=auth, json={
            "client_name": "Omar", "testimonial": "Great web work", "client_company": "Acme",
        })

        hits = sql_client.get("/api/search", params={"q": "web"}).json()
        assert [h["type"] for h in hits] == ["blog", "project", "testimonial"]
        assert hits[0]["url"] == "/blog/web-apps"
        assert hits[0]["published_at"] is not None
        assert hits[2]["rating"] == 5

        assert [h["type"] for h in sql_client.get("/api/search", params={"q": "REACT"}).json()] == ["blog"]
        assert [h["type"] for h in sql_client.get("/api/search", params={"q": "acme"}).json()] == ["testimonial"]
        tech = sql_client.get("/api/search", params={"q": "web", "category": "tech"}).json()
        assert [h["url"] for h in tech] == ["/blog/web-apps"]
        assert len(sql_client.get("/api/search", params={"q": "web", "limit": 2}).json()) == 2
