"""
Category component - category management.

Names are unique ignoring case; the slug is derived from the name once,
at creation.
"""

from __future__ import annotations

import logging

from src.domain.errors import ConflictError, NotFoundError, ValidationError
from src.domain.taxonomy import CategoryEntity
from src.domain.value_objects import Slug

from .models import CreateCategoryInput, UpdateCategoryInput
from .ports import CategoryRepoPort, ClockPort

logger = logging.getLogger(__name__)


class CategoryComponent:
    def __init__(self, category_repo: CategoryRepoPort, clock: ClockPort) -> None:
        self._category_repo = category_repo
        self._clock = clock

    def run_create(self, inp: CreateCategoryInput) -> CategoryEntity:
        if not inp.name or not inp.name.strip():
            raise ValidationError("Category name is required")
        if self._category_repo.exists_by_name(inp.name):
            raise ConflictError(f"Category already exists: {inp.name}")

        slug = Slug.from_title(inp.name)
        if self._category_repo.find_by_slug(slug.value) is not None:
            raise ConflictError(f"Category already exists: {inp.name}")

        category = CategoryEntity.create(
            slug=slug,
            name=inp.name.strip(),
            description=inp.description,
            color=inp.color,
            icon=inp.icon,
            now=self._clock.now(),
        )
        self._category_repo.save(category)
        logger.info("Category created: %s", category.slug.value)
        return category

    def run_list(self) -> list[CategoryEntity]:
        return self._category_repo.find_all()

    def run_get_by_slug(self, slug: str) -> CategoryEntity:
        category = self._category_repo.find_by_slug(slug)
        if category is None:
            raise NotFoundError("Category", slug)
        return category

    def run_update(self, inp: UpdateCategoryInput) -> CategoryEntity:
        category = self._require(inp.category_id)

        new_name = inp.changes.get("name")
        if (
            new_name
            and new_name.strip().lower() != category.name.lower()
            and self._category_repo.exists_by_name(new_name)
        ):
            raise ConflictError(f"Category already exists: {new_name}")

        category.update(inp.changes, now=self._clock.now())
        self._category_repo.save(category)
        return category

    def run_delete(self, category_id: str) -> None:
        """Delete; content in the category keeps existing without one."""
        self._require(category_id)
        self._category_repo.delete(category_id)

    def _require(self, category_id: str) -> CategoryEntity:
        category = self._category_repo.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category
