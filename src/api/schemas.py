from datetime import UTC, datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from src.components.content import ContentDetail, ContentPage, PageInfo
from src.domain.content import AnalysisEntity, ContentEntity, NewsEntity
from src.domain.taxonomy import CategoryEntity, TagEntity
from src.domain.user import UserEntity
from src.ports.repo import TagUsage

T = TypeVar("T")

# --- Shared Enums/Types ---
ContentStatusName = Literal["DRAFT", "REVIEW", "PUBLISHED", "ARCHIVED"]
AnalysisTypeName = Literal["TECHNICAL", "FUNDAMENTAL", "SENTIMENT", "MARKET_UPDATE"]
SortField = Literal["created_at", "published_at", "updated_at", "view_count", "title"]
SortOrder = Literal["asc", "desc"]


# --- Envelope ---
class ErrorBody(BaseModel):
    code: str
    message: str


class Meta(BaseModel):
    timestamp: datetime
    version: str


class ApiResponse(BaseModel, Generic[T]):
    """Every response body: data on success, error on failure."""

    data: T | None = None
    meta: Meta | None = None
    error: ErrorBody | None = None


def envelope(data: Any, version: str = "v1") -> dict[str, Any]:
    return {
        "data": data,
        "meta": {"timestamp": datetime.now(UTC).isoformat(), "version": version},
        "error": None,
    }


def error_envelope(code: str, message: str) -> dict[str, Any]:
    return {"data": None, "meta": None, "error": {"code": code, "message": message}}


# --- Categories & Tags ---
class CategoryResponse(BaseModel):
    id: str
    slug: str
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, category: CategoryEntity) -> "CategoryResponse":
        return cls(
            id=category.id,
            slug=category.slug.value,
            name=category.name,
            description=category.description,
            color=category.color,
            icon=category.icon,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = None
    icon: str | None = None


class CategoryUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    color: str | None = None
    icon: str | None = None


class TagResponse(BaseModel):
    id: str
    slug: str
    name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, tag: TagEntity) -> "TagResponse":
        return cls(
            id=tag.id,
            slug=tag.slug.value,
            name=tag.name,
            created_at=tag.created_at,
            updated_at=tag.updated_at,
        )


class PopularTagResponse(BaseModel):
    tag: TagResponse
    count: int

    @classmethod
    def from_usage(cls, usage: TagUsage) -> "PopularTagResponse":
        return cls(tag=TagResponse.from_entity(usage.tag), count=usage.count)


class TagCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)


# --- Content ---
class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_info(cls, info: PageInfo) -> "PaginationResponse":
        return cls(
            page=info.page,
            limit=info.limit,
            total=info.total,
            total_pages=info.total_pages,
            has_next=info.has_next,
            has_prev=info.has_prev,
        )


def _common_fields(item: ContentEntity) -> dict[str, Any]:
    return {
        "id": item.id,
        "slug": item.slug.value,
        "title": item.title,
        "subtitle": item.subtitle,
        "content": item.content,
        "excerpt": item.excerpt,
        "status": item.status.value,
        "is_featured": item.is_featured,
        "category_id": item.category_id,
        "featured_image_url": item.featured_image_url,
        "featured_image_alt": item.featured_image_alt,
        "meta_title": item.meta_title,
        "meta_description": item.meta_description,
        "meta_keywords": item.meta_keywords,
        "author_id": item.author_id,
        "editor_id": item.editor_id,
        "view_count": item.view_count,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
        "published_at": item.published_at,
        "archived_at": item.archived_at,
    }


def _list_fields(item: ContentEntity) -> dict[str, Any]:
    return {
        "id": item.id,
        "slug": item.slug.value,
        "title": item.title,
        "excerpt": item.excerpt,
        "status": item.status.value,
        "is_featured": item.is_featured,
        "featured_image_url": item.featured_image_url,
        "author_id": item.author_id,
        "view_count": item.view_count,
        "created_at": item.created_at,
        "published_at": item.published_at,
    }


class ContentResponse(BaseModel):
    id: str
    slug: str
    title: str
    subtitle: str | None = None
    content: str
    excerpt: str | None = None
    status: ContentStatusName
    is_featured: bool
    category_id: str | None = None
    category: CategoryResponse | None = None
    tags: list[TagResponse] = []
    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    author_id: str | None = None
    editor_id: str | None = None
    view_count: int
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None
    archived_at: datetime | None = None


class NewsResponse(ContentResponse):
    @classmethod
    def from_detail(cls, detail: ContentDetail[NewsEntity]) -> "NewsResponse":
        return cls(
            **_common_fields(detail.item),
            category=CategoryResponse.from_entity(detail.category) if detail.category else None,
            tags=[TagResponse.from_entity(t) for t in detail.tags],
        )


class AnalysisResponse(ContentResponse):
    stock_ticker: str
    analysis_type: AnalysisTypeName
    target_price: float | None = None

    @classmethod
    def from_detail(cls, detail: ContentDetail[AnalysisEntity]) -> "AnalysisResponse":
        item = detail.item
        return cls(
            **_common_fields(item),
            stock_ticker=item.stock_ticker.value,
            analysis_type=item.analysis_type.value,
            target_price=item.target_price,
            category=CategoryResponse.from_entity(detail.category) if detail.category else None,
            tags=[TagResponse.from_entity(t) for t in detail.tags],
        )


class ContentListItem(BaseModel):
    """Lighter shape for listings; no body text."""

    id: str
    slug: str
    title: str
    excerpt: str | None = None
    status: ContentStatusName
    is_featured: bool
    featured_image_url: str | None = None
    author_id: str | None = None
    view_count: int
    created_at: datetime
    published_at: datetime | None = None


class NewsListItem(ContentListItem):
    @classmethod
    def from_entity(cls, item: NewsEntity) -> "NewsListItem":
        return cls(**_list_fields(item))


class AnalysisListItem(ContentListItem):
    stock_ticker: str
    analysis_type: AnalysisTypeName
    target_price: float | None = None

    @classmethod
    def from_entity(cls, item: AnalysisEntity) -> "AnalysisListItem":
        return cls(
            **_list_fields(item),
            stock_ticker=item.stock_ticker.value,
            analysis_type=item.analysis_type.value,
            target_price=item.target_price,
        )


class NewsListResponse(BaseModel):
    items: list[NewsListItem]
    pagination: PaginationResponse

    @classmethod
    def from_page(cls, page: ContentPage[NewsEntity]) -> "NewsListResponse":
        return cls(
            items=[NewsListItem.from_entity(n) for n in page.items],
            pagination=PaginationResponse.from_info(page.pagination),
        )


class AnalysisListResponse(BaseModel):
    items: list[AnalysisListItem]
    pagination: PaginationResponse

    @classmethod
    def from_page(cls, page: ContentPage[AnalysisEntity]) -> "AnalysisListResponse":
        return cls(
            items=[AnalysisListItem.from_entity(a) for a in page.items],
            pagination=PaginationResponse.from_info(page.pagination),
        )


class ContentWriteFields(BaseModel):
    subtitle: str | None = None
    excerpt: str | None = None
    category_id: str | None = None
    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    tags: list[str] | None = None


class NewsCreateRequest(ContentWriteFields):
    title: str
    content: str
    author_id: str | None = None


class NewsUpdateRequest(ContentWriteFields):
    """Only fields present in the body are applied; an explicit null clears."""

    title: str | None = None
    content: str | None = None


class AnalysisCreateRequest(ContentWriteFields):
    title: str
    content: str
    stock_ticker: str
    analysis_type: str
    target_price: float | None = None
    author_id: str | None = None


class AnalysisUpdateRequest(ContentWriteFields):
    title: str | None = None
    content: str | None = None
    stock_ticker: str | None = None
    analysis_type: str | None = None
    target_price: float | None = None


class PublishRequest(BaseModel):
    """Optional body; the editor defaults to the caller."""

    editor_id: str | None = None


# --- Users & Auth ---
class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, user: UserEntity) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            role=user.role.value,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )


class RegisterRequest(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    role: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


# --- Upload ---
class UploadResponse(BaseModel):
    url: str
    public_id: str
    format: str
    bytes: int
