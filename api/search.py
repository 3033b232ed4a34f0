"""
Site search — case-insensitive substring match over published content.

Runs entirely on storage contract reads, so in memory mode only projects
can match (blog posts and testimonials read back empty there).
"""
from __future__ import annotations

import structlog
from typing import Iterable, Optional

from database.manager import StorageFacade
from models.schemas import BlogPost, Project, SearchResult, SearchType, Testimonial

logger = structlog.get_logger()

MIN_QUERY_LENGTH = 2


def _matches(term: str, values: Iterable[Optional[str]]) -> bool:
    return any(term in value.lower() for value in values if value)


def _blog_hit(post: BlogPost) -> SearchResult:
    return SearchResult(
        type=SearchType.BLOG,
        id=post.id,
        title=post.title,
        title_en=post.title_en,
        excerpt=post.excerpt,
        excerpt_en=post.excerpt_en,
        url=f"/blog/{post.slug}",
        category=post.category,
        category_en=post.category_en,
        tags=post.tags,
        tags_en=post.tags_en,
        published_at=post.published_at or post.created_at,
    )


def _project_hit(project: Project) -> SearchResult:
    return SearchResult(
        type=SearchType.PROJECT,
        id=project.id,
        title=project.title,
        title_en=project.title_en,
        excerpt=project.short_description or project.description,
        excerpt_en=project.short_description_en or project.description_en,
        url=f"/projects/{project.id}",
        category=project.category,
        category_en=project.category,
    )


def _testimonial_hit(item: Testimonial) -> SearchResult:
    return SearchResult(
        type=SearchType.TESTIMONIAL,
        id=item.id,
        title=item.client_name,
        title_en=item.client_name_en,
        excerpt=item.testimonial,
        excerpt_en=item.testimonial_en,
        url="/testimonials",
        rating=item.rating,
        client_name=item.client_name,
        client_name_en=item.client_name_en,
    )


async def search_content(
    storage: StorageFacade,
    query: Optional[str],
    kind: Optional[SearchType] = None,
    category: Optional[str] = None,
    limit: int = 20,
) -> list[SearchResult]:
    """
    Blog hits first, then projects, then testimonials, each in its list order.

    `category` keeps only hits whose category (either language) equals it;
    "all" disables the filter. Queries shorter than two characters return [].
    """
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []
    term = query.lower()
    results: list[SearchResult] = []

    if kind in (None, SearchType.BLOG):
        for post in await storage.get_published_blog_posts():
            if _matches(term, [post.title, post.title_en, post.excerpt, post.excerpt_en,
                               *post.tags, *post.tags_en]):
                results.append(_blog_hit(post))

    if kind in (None, SearchType.PROJECT):
        for project in await storage.get_active_projects():
            if _matches(term, [project.title, project.title_en, project.description,
                               project.description_en, project.category]):
                results.append(_project_hit(project))

    if kind in (None, SearchType.TESTIMONIAL):
        for item in await storage.get_published_testimonials():
            if _matches(term, [item.client_name, item.client_name_en, item.testimonial,
                               item.testimonial_en, item.client_company, item.client_company_en]):
                results.append(_testimonial_hit(item))

    if category and category != "all":
        results = [r for r in results if category in (r.category, r.category_en)]

    logger.debug("site_search", query=query, kind=kind, hits=len(results))
    return results[:limit]
