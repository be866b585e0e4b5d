from fastapi import APIRouter, Depends, Response
from fastapi import status as http_status

from src.api.deps import get_api_version, get_category_component, get_current_user
from src.api.schemas import (
    ApiResponse,
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    envelope,
)
from src.components.category import CategoryComponent, CreateCategoryInput, UpdateCategoryInput
from src.domain.user import UserEntity

router = APIRouter()


@router.get("", response_model=ApiResponse[list[CategoryResponse]])
def list_categories(
    component: CategoryComponent = Depends(get_category_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope([CategoryResponse.from_entity(c) for c in component.run_list()], version)


@router.get("/{slug}", response_model=ApiResponse[CategoryResponse])
def get_category(
    slug: str,
    component: CategoryComponent = Depends(get_category_component),
    version: str = Depends(get_api_version),
) -> dict:
    return envelope(CategoryResponse.from_entity(component.run_get_by_slug(slug)), version)


@router.post(
    "", response_model=ApiResponse[CategoryResponse], status_code=http_status.HTTP_201_CREATED
)
def create_category(
    req: CategoryCreateRequest,
    _: UserEntity = Depends(get_current_user),
    component: CategoryComponent = Depends(get_category_component),
    version: str = Depends(get_api_version),
) -> dict:
    inp = CreateCategoryInput(
        name=req.name, description=req.description, color=req.color, icon=req.icon
    )
    return envelope(CategoryResponse.from_entity(component.run_create(inp)), version)


@router.patch("/{category_id}", response_model=ApiResponse[CategoryResponse])
def update_category(
    category_id: str,
    req: CategoryUpdateRequest,
    _: UserEntity = Depends(get_current_user),
    component: CategoryComponent = Depends(get_category_component),
    version: str = Depends(get_api_version),
) -> dict:
    inp = UpdateCategoryInput(category_id=category_id, changes=req.model_dump(exclude_unset=True))
    return envelope(CategoryResponse.from_entity(component.run_update(inp)), version)


@router.delete("/{category_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    _: UserEntity = Depends(get_current_user),
    component: CategoryComponent = Depends(get_category_component),
) -> Response:
    component.run_delete(category_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
