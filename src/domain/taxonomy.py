"""Classification entities: categories and tags. No lifecycle, just field rules."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import uuid4

from src.domain.content import utcnow
from src.domain.errors import ValidationError
from src.domain.value_objects import Slug

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

CATEGORY_NAME_MAX = 100
CATEGORY_DESCRIPTION_MAX = 500
TAG_NAME_MAX = 50


class CategoryEntity:
    def __init__(
        self,
        *,
        id: str,
        slug: Slug,
        name: str,
        created_at: datetime,
        updated_at: datetime,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> None:
        self._id = id
        self._slug = slug
        self._name = name
        self._description = description
        self._color = color
        self._icon = icon
        self._created_at = created_at
        self._updated_at = updated_at
        self._validate()

    @classmethod
    def create(
        cls,
        *,
        slug: Slug,
        name: str,
        id: str | None = None,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
        now: datetime | None = None,
    ) -> CategoryEntity:
        stamp = now or utcnow()
        return cls(
            id=id or str(uuid4()),
            slug=slug,
            name=name,
            description=description or None,
            color=color or None,
            icon=icon or None,
            created_at=stamp,
            updated_at=stamp,
        )

    @classmethod
    def reconstitute(cls, record: Mapping[str, Any]) -> CategoryEntity:
        return cls(
            id=record["id"],
            slug=Slug.create(record["slug"]),
            name=record["name"],
            description=record.get("description"),
            color=record.get("color"),
            icon=record.get("icon"),
            created_at=_as_dt(record["created_at"]),
            updated_at=_as_dt(record["updated_at"]),
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def slug(self) -> Slug:
        return self._slug

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def color(self) -> str | None:
        return self._color

    @property
    def icon(self) -> str | None:
        return self._icon

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def update(self, changes: Mapping[str, Any], now: datetime | None = None) -> None:
        """Partial update; always permitted. Rolls back if the result is invalid."""
        allowed = {"name", "description", "color", "icon"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown or read-only fields: {', '.join(sorted(unknown))}")

        previous = {name: getattr(self, f"_{name}") for name in allowed}
        for name, value in changes.items():
            setattr(self, f"_{name}", value)
        try:
            self._validate()
        except ValidationError:
            for name, value in previous.items():
                setattr(self, f"_{name}", value)
            raise
        self._updated_at = now or utcnow()

    def _validate(self) -> None:
        if not self._name or not self._name.strip():
            raise ValidationError("Category name is required")
        if len(self._name) > CATEGORY_NAME_MAX:
            raise ValidationError(
                f"Category name must be {CATEGORY_NAME_MAX} characters or less"
            )
        if self._description and len(self._description) > CATEGORY_DESCRIPTION_MAX:
            raise ValidationError(
                f"Category description must be {CATEGORY_DESCRIPTION_MAX} characters or less"
            )
        if self._color and not HEX_COLOR.match(self._color):
            raise ValidationError("Category color must be valid hex color (e.g., #1b4049)")


class TagEntity:
    """Tag name is write-once through the public API."""

    def __init__(
        self,
        *,
        id: str,
        slug: Slug,
        name: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> None:
        self._id = id
        self._slug = slug
        self._name = name
        self._created_at = created_at
        self._updated_at = updated_at
        self._validate()

    @classmethod
    def create(
        cls, *, slug: Slug, name: str, id: str | None = None, now: datetime | None = None
    ) -> TagEntity:
        stamp = now or utcnow()
        return cls(id=id or str(uuid4()), slug=slug, name=name, created_at=stamp, updated_at=stamp)

    @classmethod
    def reconstitute(cls, record: Mapping[str, Any]) -> TagEntity:
        return cls(
            id=record["id"],
            slug=Slug.create(record["slug"]),
            name=record["name"],
            created_at=_as_dt(record["created_at"]),
            updated_at=_as_dt(record["updated_at"]),
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def slug(self) -> Slug:
        return self._slug

    @property
    def name(self) -> str:
        return self._name

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def _validate(self) -> None:
        if not self._name or not self._name.strip():
            raise ValidationError("Tag name is required")
        if len(self._name) > TAG_NAME_MAX:
            raise ValidationError(f"Tag name must be {TAG_NAME_MAX} characters or less")


def _as_dt(value: datetime | str) -> datetime:
    return value if isinstance(value, datetime) else datetime.fromisoformat(value)
