"""
FastAPI Application — Portfolio REST API.

Provides:
- Health endpoints reporting which storage backend is answering
- Public read routes for services, projects, CV, contact info, blog,
  testimonials and site settings, plus the contact form, newsletter and
  site search
- Admin routes (bearer token) for content management and diagnostics

Storage is bound before the listener accepts requests: the lifespan awaits
`StorageManager.initialize()`, which either activates the database or leaves
the seeded in-memory fallback in place.
"""
from __future__ import annotations

import structlog
from datetime import datetime, timezone
from typing import Optional
from contextlib import asynccontextmanager

# Load .env before any config is read
from dotenv import load_dotenv
load_dotenv()

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.auth import create_access_token, get_current_admin
from api.search import search_content
from config.settings import Settings, get_settings
from database.errors import ConstraintViolation, NotImplementedInMemory
from database.manager import StorageFacade, StorageManager
from database.seed import verify_password
from database.store_factory import create_storage_manager
from models import schemas

logger = structlog.get_logger()


# ──────────────────────────────────────────────────────────────
#  Request/Response Models
# ──────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    username: str
    password: str


class MessageStatusRequest(BaseModel):
    status: schemas.MessageStatus


class SettingValueRequest(BaseModel):
    value: str


class UnsubscribeRequest(BaseModel):
    email: str


# ──────────────────────────────────────────────────────────────
#  Dependencies
# ──────────────────────────────────────────────────────────────

def get_storage(request: Request) -> StorageFacade:
    return request.app.state.storage


def get_manager(request: Request) -> StorageManager:
    return request.app.state.manager


def _found(record, what: str):
    if record is None:
        raise HTTPException(404, f"{what} not found")
    return record


def _deleted(ok: bool, what: str) -> dict:
    if not ok:
        raise HTTPException(404, f"{what} not found")
    return {"message": f"{what} deleted successfully"}


public = APIRouter(prefix="/api")
admin = APIRouter(prefix="/api/admin", dependencies=[Depends(get_current_admin)])


# ══════════════════════════════════════════════════════════════
#  HEALTH
# ══════════════════════════════════════════════════════════════

async def health(manager: StorageManager = Depends(get_manager)):
    return {
        **manager.get_health_status().model_dump(by_alias=True),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ══════════════════════════════════════════════════════════════
#  PUBLIC CONTENT
# ══════════════════════════════════════════════════════════════

@public.get("/services")
async def list_services(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_active_services()


@public.get("/projects")
async def list_projects(
    category: Optional[str] = None,
    featured: bool = False,
    storage: StorageFacade = Depends(get_storage),
):
    if featured:
        return await storage.get_featured_projects()
    if category:
        return await storage.get_projects_by_category(category)
    return await storage.get_active_projects()


@public.get("/projects/{project_id}")
async def get_project(project_id: str, storage: StorageFacade = Depends(get_storage)):
    return _found(await storage.get_project(project_id), "Project")


@public.get("/cv")
async def list_cv(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_cv_data()


@public.get("/cv/{cv_type}")
async def list_cv_by_type(cv_type: schemas.CvDataType, storage: StorageFacade = Depends(get_storage)):
    return await storage.get_cv_data_by_type(cv_type.value)


@public.get("/contact-info")
async def list_contact_info(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_active_contact_info()


@public.post("/contact", status_code=201)
async def submit_contact(data: schemas.ContactMessageCreate, storage: StorageFacade = Depends(get_storage)):
    message = await storage.create_contact_message(data)
    logger.info("contact_message_received", message_id=message.id, service_type=message.service_type)
    return {"message": "Message sent successfully", "id": message.id}


@public.get("/settings")
async def list_settings(category: Optional[str] = None, storage: StorageFacade = Depends(get_storage)):
    if category:
        return await storage.get_site_settings_by_category(category)
    return await storage.get_all_site_settings()


@public.get("/settings/{key}")
async def get_setting(key: str, storage: StorageFacade = Depends(get_storage)):
    return _found(await storage.get_site_setting(key), "Setting")


# ── Blog & testimonials ───────────────────────────────────────

@public.get("/blog")
async def list_blog(
    category: Optional[str] = None,
    featured: bool = False,
    storage: StorageFacade = Depends(get_storage),
):
    if featured:
        return await storage.get_featured_blog_posts()
    if category:
        return await storage.get_blog_posts_by_category(category)
    return await storage.get_published_blog_posts()


@public.get("/blog/{slug}")
async def get_blog_post(slug: str, storage: StorageFacade = Depends(get_storage)):
    post = await storage.get_blog_post_by_slug(slug)
    if post is None or not post.is_published:
        raise HTTPException(404, "Blog post not found")
    await storage.increment_blog_post_views(post.id)
    return post


@public.get("/testimonials")
async def list_testimonials(
    featured: bool = False,
    project_id: Optional[str] = None,
    storage: StorageFacade = Depends(get_storage),
):
    if featured:
        return await storage.get_featured_testimonials()
    if project_id:
        return await storage.get_testimonials_by_project(project_id)
    return await storage.get_published_testimonials()


# ── Newsletter & analytics ────────────────────────────────────

@public.post("/newsletter/subscribe", status_code=201)
async def subscribe(data: schemas.NewsletterSubscriberCreate, storage: StorageFacade = Depends(get_storage)):
    if await storage.get_newsletter_subscriber_by_email(data.email):
        raise HTTPException(409, "Email already subscribed")
    await storage.create_newsletter_subscriber(data)
    return {"message": "Successfully subscribed to newsletter"}


@public.post("/newsletter/unsubscribe")
async def unsubscribe(req: UnsubscribeRequest, storage: StorageFacade = Depends(get_storage)):
    if not await storage.unsubscribe_from_newsletter(req.email):
        raise HTTPException(404, "Email not found")
    return {"message": "Successfully unsubscribed from newsletter"}


@public.post("/analytics", status_code=201)
async def track(data: schemas.AnalyticsCreate, storage: StorageFacade = Depends(get_storage)):
    entry = await storage.create_analytics_entry(data)
    return {"id": entry.id}


# ── Search ────────────────────────────────────────────────────

@public.get("/search", response_model=list[schemas.SearchResult])
async def search(
    q: Optional[str] = None,
    type: Optional[schemas.SearchType] = None,
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    storage: StorageFacade = Depends(get_storage),
):
    return await search_content(storage, q, kind=type, category=category, limit=limit)


# ══════════════════════════════════════════════════════════════
#  ADMIN — AUTH (outside the token-protected router)
# ══════════════════════════════════════════════════════════════

@public.post("/admin/login")
async def login(req: LoginRequest, request: Request, storage: StorageFacade = Depends(get_storage)):
    user = await storage.get_admin_user_by_username(req.username)
    if user is None or not verify_password(req.password, user.password):
        logger.info("admin_login_failed", username=req.username)
        raise HTTPException(401, "Invalid credentials")

    token = create_access_token(
        {"id": user.id, "username": user.username}, request.app.state.settings.auth,
    )
    logger.info("admin_login", username=user.username)
    return {
        "token": token,
        "user": {"id": user.id, "username": user.username, "email": user.email},
    }


# ══════════════════════════════════════════════════════════════
#  ADMIN — CONTENT
# ══════════════════════════════════════════════════════════════

@admin.get("/services")
async def admin_list_services(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_services()


@admin.post("/services", status_code=201)
async def admin_create_service(data: schemas.ServiceCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_service(data)


@admin.put("/services/{service_id}")
async def admin_update_service(
    service_id: str, patch: schemas.ServiceUpdate, storage: StorageFacade = Depends(get_storage),
):
    return _found(await storage.update_service(service_id, patch), "Service")


@admin.delete("/services/{service_id}")
async def admin_delete_service(service_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_service(service_id), "Service")


@admin.get("/projects")
async def admin_list_projects(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_projects()


@admin.post("/projects", status_code=201)
async def admin_create_project(data: schemas.ProjectCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_project(data)


@admin.put("/projects/{project_id}")
async def admin_update_project(
    project_id: str, patch: schemas.ProjectUpdate, storage: StorageFacade = Depends(get_storage),
):
    return _found(await storage.update_project(project_id, patch), "Project")


@admin.delete("/projects/{project_id}")
async def admin_delete_project(project_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_project(project_id), "Project")


@admin.get("/cv")
async def admin_list_cv(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_cv_data()


@admin.post("/cv", status_code=201)
async def admin_create_cv(data: schemas.CvDataCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_cv_data(data)


@admin.put("/cv/{item_id}")
async def admin_update_cv(item_id: str, patch: schemas.CvDataUpdate, storage: StorageFacade = Depends(get_storage)):
    return _found(await storage.update_cv_data(item_id, patch), "CV item")


@admin.delete("/cv/{item_id}")
async def admin_delete_cv(item_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_cv_data(item_id), "CV item")


@admin.get("/contact-info")
async def admin_list_contact_info(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_contact_info()


@admin.post("/contact-info", status_code=201)
async def admin_create_contact_info(data: schemas.ContactInfoCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_contact_info(data)


@admin.put("/contact-info/{info_id}")
async def admin_update_contact_info(
    info_id: str, patch: schemas.ContactInfoUpdate, storage: StorageFacade = Depends(get_storage),
):
    return _found(await storage.update_contact_info(info_id, patch), "Contact info")


@admin.delete("/contact-info/{info_id}")
async def admin_delete_contact_info(info_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_contact_info(info_id), "Contact info")


# ── Messages ──────────────────────────────────────────────────

@admin.get("/messages")
async def admin_list_messages(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_contact_messages()


@admin.put("/messages/{message_id}/status")
async def admin_update_message_status(
    message_id: str, req: MessageStatusRequest, storage: StorageFacade = Depends(get_storage),
):
    return _found(await storage.update_contact_message_status(message_id, req.status), "Message")


@admin.delete("/messages/{message_id}")
async def admin_delete_message(message_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_contact_message(message_id), "Message")


# ── Site settings ─────────────────────────────────────────────

@admin.post("/settings", status_code=201)
async def admin_create_setting(data: schemas.SiteSettingCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_site_setting(data)


@admin.put("/settings/{key}")
async def admin_update_setting(key: str, req: SettingValueRequest, storage: StorageFacade = Depends(get_storage)):
    return _found(await storage.update_site_setting(key, req.value), "Setting")


@admin.delete("/settings/{key}")
async def admin_delete_setting(key: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_site_setting(key), "Setting")


# ── Blog ──────────────────────────────────────────────────────

@admin.get("/blog")
async def admin_list_blog(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_blog_posts()


@admin.post("/blog", status_code=201)
async def admin_create_blog_post(data: schemas.BlogPostCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_blog_post(data)


@admin.put("/blog/{post_id}")
async def admin_update_blog_post(
    post_id: str, patch: schemas.BlogPostUpdate, storage: StorageFacade = Depends(get_storage),
):
    return _found(await storage.update_blog_post(post_id, patch), "Blog post")


@admin.delete("/blog/{post_id}")
async def admin_delete_blog_post(post_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_blog_post(post_id), "Blog post")


# ── Testimonials ──────────────────────────────────────────────

@admin.get("/testimonials")
async def admin_list_testimonials(storage: StorageFacade = Depends(get_storage)):
    return await storage.get_all_testimonials()


@admin.post("/testimonials", status_code=201)
async def admin_create_testimonial(data: schemas.TestimonialCreate, storage: StorageFacade = Depends(get_storage)):
    return await storage.create_testimonial(data)


@admin.put("/testimonials/{testimonial_id}")
async def admin_update_testimonial(
    testimonial_id: str, patch: schemas.TestimonialUpdate, storage: StorageFacade = Depends(get_storage),
):
    return _found(await storage.update_testimonial(testimonial_id, patch), "Testimonial")


@admin.delete("/testimonials/{testimonial_id}")
async def admin_delete_testimonial(testimonial_id: str, storage: StorageFacade = Depends(get_storage)):
    return _deleted(await storage.delete_testimonial(testimonial_id), "Testimonial")


# ── Newsletter & analytics ────────────────────────────────────

@admin.get("/newsletter")
async def admin_list_subscribers(active: bool = False, storage: StorageFacade = Depends(get_storage)):
    if active:
        return await storage.get_active_newsletter_subscribers()
    return await storage.get_all_newsletter_subscribers()


@admin.get("/analytics")
async def admin_analytics(
    type: Optional[schemas.AnalyticsType] = None,
    days: int = Query(30, ge=1, le=3650),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    storage: StorageFacade = Depends(get_storage),
):
    if start and end:
        return await storage.get_analytics_by_date_range(start, end)
    if type:
        return await storage.get_analytics_by_type(type.value, days)
    return await storage.get_page_view_stats(days)


# ══════════════════════════════════════════════════════════════
#  ADMIN — STORAGE DIAGNOSTICS
# ══════════════════════════════════════════════════════════════

@admin.post("/reconnect")
async def admin_reconnect(manager: StorageManager = Depends(get_manager)):
    success = await manager.attempt_database_reconnection()
    return {"success": success, **manager.get_health_status().model_dump(by_alias=True)}


@admin.get("/db-stats")
async def admin_db_stats(
    manager: StorageManager = Depends(get_manager),
    storage: StorageFacade = Depends(get_storage),
):
    return {
        "storage": manager.get_health_status().model_dump(by_alias=True),
        "state": manager.state.value,
        "counts": await storage.stats(),
    }


# ──────────────────────────────────────────────────────────────
#  Error mapping
# ──────────────────────────────────────────────────────────────

async def _constraint_violation(request: Request, exc: ConstraintViolation):
    return JSONResponse(status_code=409, content={"detail": str(exc), "entity": exc.entity, "field": exc.field})


async def _not_implemented(request: Request, exc: NotImplementedInMemory):
    return JSONResponse(status_code=501, content={"detail": str(exc), "operation": exc.operation})


# ──────────────────────────────────────────────────────────────
#  App
# ──────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    manager, storage = create_storage_manager(settings)
    app.state.manager = manager
    app.state.storage = storage

    # Backend is decided before the first request is served
    await manager.initialize()
    logger.info("portfolio_api_started",
                storage_type=manager.storage_type,
                environment=settings.environment)
    yield

    await manager.close()
    logger.info("portfolio_api_stopped")


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Bilingual portfolio content API with database/in-memory storage",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route("/api/health", health, methods=["GET"])
    app.include_router(public)
    app.include_router(admin)

    app.add_exception_handler(ConstraintViolation, _constraint_violation)
    app.add_exception_handler(NotImplementedInMemory, _not_implemented)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=get_settings().port, reload=False)
