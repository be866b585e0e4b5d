"""
Category component - editorial categories.
"""

from .component import CategoryComponent
from .models import CreateCategoryInput, UpdateCategoryInput
from .ports import CategoryRepoPort, ClockPort

__all__ = [
    "CategoryComponent",
    "CreateCategoryInput",
    "UpdateCategoryInput",
    "CategoryRepoPort",
    "ClockPort",
]
