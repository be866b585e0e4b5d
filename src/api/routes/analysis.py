from datetime import datetime

from fastapi import APIRouter, Body, Depends, Response
from fastapi import status as http_status

from src.api.deps import (
    get_analysis_component,
    get_api_version,
    get_current_user,
    get_rules,
    require_publisher,
)
from src.api.schemas import (
    AnalysisCreateRequest,
    AnalysisListItem,
    AnalysisListResponse,
    AnalysisResponse,
    AnalysisUpdateRequest,
    ApiResponse,
    PublishRequest,
    SortField,
    SortOrder,
    envelope,
)
from src.components.analysis import (
    AnalysisComponent,
    CreateAnalysisInput,
    ListAnalysisInput,
    PublishAnalysisInput,
    UpdateAnalysisInput,
    parse_ticker_list,
)
from src.domain.user import UserEntity
from src.rules.models import Rules

router = APIRouter()


@router.get("", response_model=ApiResponse[AnalysisListResponse])
def list_analysis(
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
    stock_ticker: str | None = None,
    stock_tickers: str | None = None,
    analysis_type: str | None = None,
    sort_by: SortField = "created_at",
    sort_order: SortOrder = "desc",
    component: AnalysisComponent = Depends(get_analysis_component),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict:
    """Paginated analysis listing. `stock_tickers` is a comma separated list."""
    inp = ListAnalysisInput(
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
        stock_ticker=stock_ticker,
        stock_tickers=parse_ticker_list(stock_tickers),
        analysis_type=analysis_type,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return envelope(AnalysisListResponse.from_page(component.run_list(inp)), version)


@router.get("/featured", response_model=ApiResponse[list[AnalysisListItem]])
def featured_analysis(
    component: AnalysisComponent = Depends(get_analysis_component),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict:
    items = component.run_featured(rules.pagination.featured_limit)
    return envelope([AnalysisListItem.from_entity(a) for a in items], version)


@router.get("/stock/{ticker}", response_model=ApiResponse[list[AnalysisListItem]])
def latest_by_stock(
    ticker: str,
    component: AnalysisComponent = Depends(get_analysis_component),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict:
    """Latest published analyses for one ticker."""
    items = component.run_latest_by_stock(ticker, rules.pagination.latest_by_stock_limit)
    return envelope([AnalysisListItem.from_entity(a) for a in items], version)


@router.get("/id/{analysis_id}", response_model=ApiResponse[AnalysisResponse])
def get_analysis(
    analysis_id: str,
    _: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(AnalysisResponse.from_detail(component.run_get(analysis_id)), version)


@router.get("/{slug}", response_model=ApiResponse[AnalysisResponse])
def get_analysis_by_slug(
    slug: str,
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(AnalysisResponse.from_detail(component.run_get_by_slug(slug)), version)


@router.post(
    "", response_model=ApiResponse[AnalysisResponse], status_code=http_status.HTTP_201_CREATED
)
def create_analysis(
    req: AnalysisCreateRequest,
    current_user: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    inp = CreateAnalysisInput(
        title=req.title,
        content=req.content,
        author_id=req.author_id or current_user.id,
        stock_ticker=req.stock_ticker,
        analysis_type=req.analysis_type,
        target_price=req.target_price,
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
    return envelope(AnalysisResponse.from_detail(component.run_create(inp)), version)


@router.patch("/{analysis_id}", response_model=ApiResponse[AnalysisResponse])
def update_analysis(
    analysis_id: str,
    req: AnalysisUpdateRequest,
    _: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    changes = req.model_dump(exclude_unset=True, exclude={"tags"})
    inp = UpdateAnalysisInput(analysis_id=analysis_id, changes=changes, tags=req.tags)
    return envelope(AnalysisResponse.from_detail(component.run_update(inp)), version)


@router.post("/{analysis_id}/submit", response_model=ApiResponse[AnalysisResponse])
def submit_analysis(
    analysis_id: str,
    _: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    detail = component.run_submit_for_review(analysis_id)
    return envelope(AnalysisResponse.from_detail(detail), version)


@router.post("/{analysis_id}/publish", response_model=ApiResponse[AnalysisResponse])
def publish_analysis(
    analysis_id: str,
    req: PublishRequest | None = Body(default=None),
    editor: UserEntity = Depends(require_publisher),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    editor_id = (req.editor_id if req else None) or editor.id
    detail = component.run_publish(
        PublishAnalysisInput(analysis_id=analysis_id, editor_id=editor_id)
    )
    return envelope(AnalysisResponse.from_detail(detail), version)


@router.post("/{analysis_id}/feature", response_model=ApiResponse[AnalysisResponse])
def feature_analysis(
    analysis_id: str,
    _: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    detail = component.run_set_featured(analysis_id, True)
    return envelope(AnalysisResponse.from_detail(detail), version)


@router.post("/{analysis_id}/unfeature", response_model=ApiResponse[AnalysisResponse])
def unfeature_analysis(
    analysis_id: str,
    _: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
    version: str = Depends(get_api_version),
) -> dict:
    detail = component.run_set_featured(analysis_id, False)
    return envelope(AnalysisResponse.from_detail(detail), version)


@router.delete("/{analysis_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_analysis(
    analysis_id: str,
    _: UserEntity = Depends(get_current_user),
    component: AnalysisComponent = Depends(get_analysis_component),
) -> Response:
    component.run_delete(analysis_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
