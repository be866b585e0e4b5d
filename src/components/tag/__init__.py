"""
Tag component - tag management and usage statistics.
"""

from .component import TagComponent
from .models import CreateTagInput
from .ports import ClockPort, TagRepoPort, TagUsage

__all__ = ["TagComponent", "CreateTagInput", "ClockPort", "TagRepoPort", "TagUsage"]
