"""Category component models - frozen dataclass inputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CreateCategoryInput:
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class UpdateCategoryInput:
    """Partial update of name, description, color or icon. The slug is kept."""

    category_id: str
    changes: dict[str, Any] = field(default_factory=dict)
