from datetime import datetime

from fastapi import APIRouter, Body, Depends, Response
from fastapi import status as http_status

from src.api.deps import (
    get_api_version,
    get_current_user,
    get_news_component,
    get_rules,
    require_publisher,
)
from src.api.schemas import (
    ApiResponse,
    NewsCreateRequest,
    NewsListItem,
    NewsListResponse,
    NewsResponse,
    NewsUpdateRequest,
    PublishRequest,
    SortField,
    SortOrder,
    envelope,
)
from src.components.news import (
    CreateNewsInput,
    ListNewsInput,
    NewsComponent,
    PublishNewsInput,
    UpdateNewsInput,
)
from src.domain.user import UserEntity
from src.rules.models import Rules

router = APIRouter()


@router.get("", response_model=ApiResponse[NewsListResponse])
def list_news(
    page: int = 1,
    limit: int | None = None,
    status: str | None = None,
    author_id: str | None = None,
    category_id: str | None = None,
    tag_id: str | None = None,
    search: str | None = None,
    is_featured: bool | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    sort_by: SortField = "created_at",
    sort_order: SortOrder = "desc",
    component: NewsComponent = Depends(get_news_component),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict:
    """Paginated news listing with filters."""
    inp = ListNewsInput(
        page=page,
        limit=limit or rules.pagination.default_limit,
        status=status,
        author_id=author_id,
        category_id=category_id,
        tag_id=tag_id,
        search=search,
        is_featured=is_featured,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return envelope(NewsListResponse.from_page(component.run_list(inp)), version)


@router.get("/featured", response_model=ApiResponse[list[NewsListItem]])
def featured_news(
    component: NewsComponent = Depends(get_news_component),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict:
    items = component.run_featured(rules.pagination.featured_limit)
    return envelope([NewsListItem.from_entity(n) for n in items], version)


@router.get("/id/{news_id}", response_model=ApiResponse[NewsResponse])
def get_news(
    news_id: str,
    _: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    """Staff lookup by id; does not count a view."""
    return envelope(NewsResponse.from_detail(component.run_get(news_id)), version)


@router.get("/{slug}", response_model=ApiResponse[NewsResponse])
def get_news_by_slug(
    slug: str,
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(NewsResponse.from_detail(component.run_get_by_slug(slug)), version)


@router.post(
    "", response_model=ApiResponse[NewsResponse], status_code=http_status.HTTP_201_CREATED
)
def create_news(
    req: NewsCreateRequest,
    current_user: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    inp = CreateNewsInput(
        title=req.title,
        content=req.content,
        author_id=req.author_id or current_user.id,
        subtitle=req.subtitle,
        excerpt=req.excerpt,
        category_id=req.category_id,
        featured_image_url=req.featured_image_url,
        featured_image_alt=req.featured_image_alt,
        meta_title=req.meta_title,
        meta_description=req.meta_description,
        meta_keywords=req.meta_keywords,
        tags=req.tags,
    )
    return envelope(NewsResponse.from_detail(component.run_create(inp)), version)


@router.patch("/{news_id}", response_model=ApiResponse[NewsResponse])
def update_news(
    news_id: str,
    req: NewsUpdateRequest,
    _: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    changes = req.model_dump(exclude_unset=True, exclude={"tags"})
    inp = UpdateNewsInput(news_id=news_id, changes=changes, tags=req.tags)
    return envelope(NewsResponse.from_detail(component.run_update(inp)), version)


@router.post("/{news_id}/submit", response_model=ApiResponse[NewsResponse])
def submit_news(
    news_id: str,
    _: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(NewsResponse.from_detail(component.run_submit_for_review(news_id)), version)


@router.post("/{news_id}/publish", response_model=ApiResponse[NewsResponse])
def publish_news(
    news_id: str,
    req: PublishRequest | None = Body(default=None),
    editor: UserEntity = Depends(require_publisher),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    editor_id = (req.editor_id if req else None) or editor.id
    detail = component.run_publish(PublishNewsInput(news_id=news_id, editor_id=editor_id))
    return envelope(NewsResponse.from_detail(detail), version)


@router.post("/{news_id}/unpublish", response_model=ApiResponse[NewsResponse])
def unpublish_news(
    news_id: str,
    _: UserEntity = Depends(require_publisher),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(NewsResponse.from_detail(component.run_unpublish(news_id)), version)


@router.post("/{news_id}/archive", response_model=ApiResponse[NewsResponse])
def archive_news(
    news_id: str,
    _: UserEntity = Depends(require_publisher),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(NewsResponse.from_detail(component.run_archive(news_id)), version)


@router.post("/{news_id}/feature", response_model=ApiResponse[NewsResponse])
def feature_news(
    news_id: str,
    _: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(NewsResponse.from_detail(component.run_set_featured(news_id, True)), version)


@router.post("/{news_id}/unfeature", response_model=ApiResponse[NewsResponse])
def unfeature_news(
    news_id: str,
    _: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(NewsResponse.from_detail(component.run_set_featured(news_id, False)), version)


@router.delete("/{news_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_news(
    news_id: str,
    _: UserEntity = Depends(get_current_user),
    component: NewsComponent = Depends(get_news_component),
) -> Response:
    component.run_delete(news_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
