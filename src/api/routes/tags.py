from fastapi import APIRouter, Depends, Response
from fastapi import status as http_status

from src.api.deps import get_api_version, get_current_user, get_rules, get_tag_component
from src.api.schemas import (
    ApiResponse,
    PopularTagResponse,
    TagCreateRequest,
    TagResponse,
    envelope,
)
from src.components.tag import CreateTagInput, TagComponent
from src.domain.user import UserEntity
from src.rules.models import Rules

router = APIRouter()


@router.get("", response_model=ApiResponse[list[TagResponse]])
def list_tags(
    component: TagComponent = Depends(get_tag_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope([TagResponse.from_entity(t) for t in component.run_list()], version)


@router.get("/popular", response_model=ApiResponse[list[PopularTagResponse]])
def popular_tags(
    limit: int | None = None,
    component: TagComponent = Depends(get_tag_component),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict:
    usages = component.run_popular(limit or rules.pagination.popular_tags_limit)
    return envelope([PopularTagResponse.from_usage(u) for u in usages], version)


@router.post(
    "", response_model=ApiResponse[TagResponse], status_code=http_status.HTTP_201_CREATED
)
def create_tag(
    req: TagCreateRequest,
    _: UserEntity = Depends(get_current_user),
    component: TagComponent = Depends(get_tag_component),
    version: str = Depends(get_api_version),
) -> dict:
    tag = component.run_create(CreateTagInput(name=req.name))
    return envelope(TagResponse.from_entity(tag), version)


@router.delete("/{tag_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_tag(
    tag_id: str,
    _: UserEntity = Depends(get_current_user),
    component: TagComponent = Depends(get_tag_component),
) -> Response:
    component.run_delete(tag_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
