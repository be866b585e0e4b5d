"""
Analysis component - stock analysis use cases.

Analyses follow the shared lifecycle without unpublish or archive, and
carry a ticker, an analysis type and an optional target price.
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
from src.domain.content import AnalysisEntity
from src.domain.errors import ConflictError, ValidationError
from src.domain.value_objects import AnalysisType, StockTicker

from .models import (
    CreateAnalysisInput,
    ListAnalysisInput,
    PublishAnalysisInput,
    UpdateAnalysisInput,
)
from .ports import AnalysisRepoPort, CategoryRepoPort, ClockPort, ContentQuery, TagRepoPort

logger = logging.getLogger(__name__)

LABEL = "Analysis"
VIEW_COUNT_ATTEMPTS = 3


def parse_ticker_list(raw: str | None) -> list[str]:
    """Split a comma separated ticker list; blanks dropped, upper-cased."""
    if not raw:
        return []
    return [t.strip().upper() for t in raw.split(",") if t.strip()]


class AnalysisComponent:
    """Use cases for the stock analysis lifecycle."""

    def __init__(
        self,
        analysis_repo: AnalysisRepoPort,
        category_repo: CategoryRepoPort,
        tag_repo: TagRepoPort,
        clock: ClockPort,
        max_page_size: int = 100,
    ) -> None:
        self._analysis_repo = analysis_repo
        self._category_repo = category_repo
        self._tag_repo = tag_repo
        self._clock = clock
        self._max_page_size = max_page_size

    # --- Queries ---

    def run_get(self, analysis_id: str) -> ContentDetail[AnalysisEntity]:
        return self._detail(require_item(self._analysis_repo, analysis_id, LABEL))

    def run_get_by_slug(self, slug: str) -> ContentDetail[AnalysisEntity]:
        for attempt in range(1, VIEW_COUNT_ATTEMPTS + 1):
            analysis = require_item_by_slug(self._analysis_repo, slug, LABEL)
            if not analysis.is_published():
                return self._detail(analysis)
            analysis.increment_views()
            try:
                self._analysis_repo.save(analysis)
                break
            except ConflictError:
                if attempt == VIEW_COUNT_ATTEMPTS:
                    raise
                logger.warning("View count write raced for analysis %s, retrying", analysis.id)
        return self._detail(analysis)

    def run_list(self, inp: ListAnalysisInput) -> ContentPage[AnalysisEntity]:
        analysis_type = None
        if inp.analysis_type:
            analysis_type = AnalysisType.from_string(inp.analysis_type).value

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
            stock_ticker=inp.stock_ticker,
            stock_tickers=list(inp.stock_tickers),
            analysis_type=analysis_type,
            sort_by=inp.sort_by,
            sort_order=inp.sort_order,
        )
        return build_page(self._analysis_repo, query)

    def run_featured(self, limit: int = 5) -> list[AnalysisEntity]:
        query = ContentQuery(
            limit=clamp_limit(limit, self._max_page_size),
            status="PUBLISHED",
            is_featured=True,
            sort_by="published_at",
            sort_order="desc",
        )
        return self._analysis_repo.find_many(query)

    def run_latest_by_stock(self, ticker: str, limit: int = 5) -> list[AnalysisEntity]:
        """Published analyses for one ticker, newest publication first."""
        stock = StockTicker.create(ticker)
        query = ContentQuery(
            limit=clamp_limit(limit, self._max_page_size),
            status="PUBLISHED",
            stock_ticker=stock.value,
            sort_by="published_at",
            sort_order="desc",
        )
        return self._analysis_repo.find_many(query)

    # --- Commands ---

    def run_create(self, inp: CreateAnalysisInput) -> ContentDetail[AnalysisEntity]:
        if not inp.stock_ticker:
            raise ValidationError("Stock ticker is required")
        if not inp.analysis_type:
            raise ValidationError("Analysis type is required")

        slug = reserve_slug(self._analysis_repo, inp.title)
        check_category(self._category_repo, inp.category_id)
        check_tag_names(inp.tags)

        analysis = AnalysisEntity.create(
            slug=slug,
            title=inp.title,
            subtitle=inp.subtitle,
            content=inp.content,
            excerpt=inp.excerpt,
            author_id=inp.author_id,
            stock_ticker=StockTicker.create(inp.stock_ticker),
            analysis_type=AnalysisType.from_string(inp.analysis_type),
            target_price=inp.target_price,
            category_id=inp.category_id,
            featured_image_url=inp.featured_image_url,
            featured_image_alt=inp.featured_image_alt,
            meta_title=inp.meta_title or inp.title,
            meta_description=inp.meta_description or inp.excerpt,
            meta_keywords=inp.meta_keywords,
            now=self._clock.now(),
        )
        self._analysis_repo.save(analysis)
        apply_tags(self._analysis_repo, self._tag_repo, analysis.id, inp.tags)
        logger.info("Analysis created: %s (%s)", analysis.id, analysis.stock_ticker.value)
        return self._detail(analysis)

    def run_update(self, inp: UpdateAnalysisInput) -> ContentDetail[AnalysisEntity]:
        analysis = require_item(self._analysis_repo, inp.analysis_id, LABEL)
        if inp.changes.get("category_id"):
            check_category(self._category_repo, inp.changes["category_id"])
        check_tag_names(inp.tags)

        analysis.update(inp.changes, now=self._clock.now())
        self._analysis_repo.save(analysis)
        apply_tags(self._analysis_repo, self._tag_repo, analysis.id, inp.tags)
        return self._detail(analysis)

    def run_submit_for_review(self, analysis_id: str) -> ContentDetail[AnalysisEntity]:
        analysis = require_item(self._analysis_repo, analysis_id, LABEL)
        analysis.submit_for_review(now=self._clock.now())
        return self._save(analysis)

    def run_publish(self, inp: PublishAnalysisInput) -> ContentDetail[AnalysisEntity]:
        analysis = require_item(self._analysis_repo, inp.analysis_id, LABEL)
        analysis.publish(inp.editor_id, now=self._clock.now())
        logger.info("Analysis published: %s by %s", analysis.id, inp.editor_id)
        return self._save(analysis)

    def run_set_featured(self, analysis_id: str, featured: bool) -> ContentDetail[AnalysisEntity]:
        analysis = require_item(self._analysis_repo, analysis_id, LABEL)
        analysis.set_featured(featured, now=self._clock.now())
        return self._save(analysis)

    def run_delete(self, analysis_id: str) -> None:
        require_item(self._analysis_repo, analysis_id, LABEL)
        self._analysis_repo.delete(analysis_id)

    # --- Internals ---

    def _save(self, analysis: AnalysisEntity) -> ContentDetail[AnalysisEntity]:
        self._analysis_repo.save(analysis)
        return self._detail(analysis)

    def _detail(self, analysis: AnalysisEntity) -> ContentDetail[AnalysisEntity]:
        return load_detail(analysis, self._analysis_repo, self._category_repo, self._tag_repo)
