"""Analysis component models - frozen dataclass inputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.ports.repo import SortField, SortOrder


@dataclass(frozen=True)
class CreateAnalysisInput:
    """Input for creating a stock analysis in DRAFT. Ticker and type are raw strings."""

    title: str
    content: str
    author_id: str
    stock_ticker: str
    analysis_type: str
    target_price: float | None = None
    subtitle: str | None = None
    excerpt: str | None = None
    category_id: str | None = None
    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    tags: list[str] | None = None


@dataclass(frozen=True)
class UpdateAnalysisInput:
    analysis_id: str
    changes: dict[str, Any] = field(default_factory=dict)
    tags: list[str] | None = None


@dataclass(frozen=True)
class ListAnalysisInput:
    page: int = 1
    limit: int = 10
    status: str | None = None
    author_id: str | None = None
    category_id: str | None = None
    tag_id: str | None = None
    search: str | None = None
    is_featured: bool | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    stock_ticker: str | None = None
    stock_tickers: list[str] = field(default_factory=list)
    analysis_type: str | None = None
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"


@dataclass(frozen=True)
class PublishAnalysisInput:
    analysis_id: str
    editor_id: str
