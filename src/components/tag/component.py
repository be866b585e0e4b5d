"""
Tag component - free-form tags shared by news and analysis.
"""

from __future__ import annotations

from src.domain.errors import ConflictError, NotFoundError, ValidationError
from src.domain.taxonomy import TagEntity
from src.domain.value_objects import Slug

from .models import CreateTagInput
from .ports import ClockPort, TagRepoPort, TagUsage

DEFAULT_POPULAR_LIMIT = 10


class TagComponent:
    def __init__(self, tag_repo: TagRepoPort, clock: ClockPort) -> None:
        self._tag_repo = tag_repo
        self._clock = clock

    def run_create(self, inp: CreateTagInput) -> TagEntity:
        name = inp.name.strip()
        if not name:
            raise ValidationError("Tag name is required")
        if self._tag_repo.exists_by_name(name):
            raise ConflictError(f"Tag already exists: {name}")

        slug = Slug.from_title(name)
        if self._tag_repo.find_by_slug(slug.value) is not None:
            raise ConflictError(f"Tag already exists: {name}")

        tag = TagEntity.create(slug=slug, name=name, now=self._clock.now())
        self._tag_repo.save(tag)
        return tag

    def run_list(self) -> list[TagEntity]:
        return self._tag_repo.find_all()

    def run_popular(self, limit: int = DEFAULT_POPULAR_LIMIT) -> list[TagUsage]:
        """Tags ordered by how many live news and analysis items use them."""
        return self._tag_repo.get_popular_tags(max(limit, 1))

    def run_delete(self, tag_id: str) -> None:
        if self._tag_repo.find_by_id(tag_id) is None:
            raise NotFoundError("Tag", tag_id)
        self._tag_repo.delete(tag_id)
