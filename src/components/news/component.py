"""
News component - news use cases.

Every lifecycle rule lives on NewsEntity; this layer loads, delegates,
persists and enriches. Domain errors propagate unchanged.
"""

from __future__ import annotations

import logging

from src.components.content import (
    ContentDetail,
    ContentPage,
    apply_tags,
    build_page,
    check_category,
    check_tag_names,
    clamp_limit,
    load_detail,
    require_item,
    require_item_by_slug,
    reserve_slug,
)
from src.domain.content import NewsEntity
from src.domain.errors import ConflictError

from .models import CreateNewsInput, ListNewsInput, PublishNewsInput, UpdateNewsInput
from .ports import CategoryRepoPort, ClockPort, ContentQuery, NewsRepoPort, TagRepoPort

logger = logging.getLogger(__name__)

LABEL = "News"
VIEW_COUNT_ATTEMPTS = 3


class NewsComponent:
    """Use cases for the news lifecycle."""

    def __init__(
        self,
        news_repo: NewsRepoPort,
        category_repo: CategoryRepoPort,
        tag_repo: TagRepoPort,
        clock: ClockPort,
        max_page_size: int = 100,
    ) -> None:
        self._news_repo = news_repo
        self._category_repo = category_repo
        self._tag_repo = tag_repo
        self._clock = clock
        self._max_page_size = max_page_size

    # --- Queries ---

    def run_get(self, news_id: str) -> ContentDetail[NewsEntity]:
        """Fetch by id without counting a view."""
        return self._detail(require_item(self._news_repo, news_id, LABEL))

    def run_get_by_slug(self, slug: str) -> ContentDetail[NewsEntity]:
        """Fetch by slug and count a view (only published items count)."""
        for attempt in range(1, VIEW_COUNT_ATTEMPTS + 1):
            news = require_item_by_slug(self._news_repo, slug, LABEL)
            if not news.is_published():
                return self._detail(news)
            news.increment_views()
            try:
                self._news_repo.save(news)
                break
            except ConflictError:
                if attempt == VIEW_COUNT_ATTEMPTS:
                    raise
                logger.warning("View count write raced for news %s, retrying", news.id)
        return self._detail(news)

    def run_list(self, inp: ListNewsInput) -> ContentPage[NewsEntity]:
        query = ContentQuery(
            page=max(inp.page, 1),
            limit=clamp_limit(inp.limit, self._max_page_size),
            status=inp.status,
            author_id=inp.author_id,
            category_id=inp.category_id,
            tag_id=inp.tag_id,
            search_term=inp.search,
            is_featured=inp.is_featured,
            date_from=inp.date_from,
            date_to=inp.date_to,
            sort_by=inp.sort_by,
            sort_order=inp.sort_order,
        )
        return build_page(self._news_repo, query)

    def run_featured(self, limit: int = 5) -> list[NewsEntity]:
        """Published and featured, newest publication first."""
        query = ContentQuery(
            limit=clamp_limit(limit, self._max_page_size),
            status="PUBLISHED",
            is_featured=True,
            sort_by="published_at",
            sort_order="desc",
        )
        return self._news_repo.find_many(query)

    # --- Commands ---

    def run_create(self, inp: CreateNewsInput) -> ContentDetail[NewsEntity]:
        slug = reserve_slug(self._news_repo, inp.title)
        check_category(self._category_repo, inp.category_id)
        check_tag_names(inp.tags)

        news = NewsEntity.create(
            slug=slug,
            title=inp.title,
            subtitle=inp.subtitle,
            content=inp.content,
            excerpt=inp.excerpt,
            author_id=inp.author_id,
            category_id=inp.category_id,
            featured_image_url=inp.featured_image_url,
            featured_image_alt=inp.featured_image_alt,
            meta_title=inp.meta_title or inp.title,
            meta_description=inp.meta_description or inp.excerpt,
            meta_keywords=inp.meta_keywords,
            now=self._clock.now(),
        )
        self._news_repo.save(news)
        apply_tags(self._news_repo, self._tag_repo, news.id, inp.tags)
        logger.info("News created: %s (%s)", news.id, news.slug.value)
        return self._detail(news)

    def run_update(self, inp: UpdateNewsInput) -> ContentDetail[NewsEntity]:
        news = require_item(self._news_repo, inp.news_id, LABEL)
        if inp.changes.get("category_id"):
            check_category(self._category_repo, inp.changes["category_id"])
        check_tag_names(inp.tags)

        news.update(inp.changes, now=self._clock.now())
        self._news_repo.save(news)
        apply_tags(self._news_repo, self._tag_repo, news.id, inp.tags)
        return self._detail(news)

    def run_submit_for_review(self, news_id: str) -> ContentDetail[NewsEntity]:
        news = require_item(self._news_repo, news_id, LABEL)
        news.submit_for_review(now=self._clock.now())
        return self._save(news)

    def run_publish(self, inp: PublishNewsInput) -> ContentDetail[NewsEntity]:
        news = require_item(self._news_repo, inp.news_id, LABEL)
        news.publish(inp.editor_id, now=self._clock.now())
        logger.info("News published: %s by %s", news.id, inp.editor_id)
        return self._save(news)

    def run_unpublish(self, news_id: str) -> ContentDetail[NewsEntity]:
        news = require_item(self._news_repo, news_id, LABEL)
        news.unpublish(now=self._clock.now())
        return self._save(news)

    def run_archive(self, news_id: str) -> ContentDetail[NewsEntity]:
        news = require_item(self._news_repo, news_id, LABEL)
        news.archive(now=self._clock.now())
        return self._save(news)

    def run_set_featured(self, news_id: str, featured: bool) -> ContentDetail[NewsEntity]:
        news = require_item(self._news_repo, news_id, LABEL)
        news.set_featured(featured, now=self._clock.now())
        return self._save(news)

    def run_delete(self, news_id: str) -> None:
        require_item(self._news_repo, news_id, LABEL)
        self._news_repo.delete(news_id)

    # --- Internals ---

    def _save(self, news: NewsEntity) -> ContentDetail[NewsEntity]:
        self._news_repo.save(news)
        return self._detail(news)

    def _detail(self, news: NewsEntity) -> ContentDetail[NewsEntity]:
        return load_detail(news, self._news_repo, self._category_repo, self._tag_repo)
