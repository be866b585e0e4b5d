"""
Analysis component - stock analysis lifecycle.
"""

from .component import AnalysisComponent, parse_ticker_list
from .models import (
    CreateAnalysisInput,
    ListAnalysisInput,
    PublishAnalysisInput,
    UpdateAnalysisInput,
)
from .ports import AnalysisRepoPort, CategoryRepoPort, ClockPort, TagRepoPort

__all__ = [
    # Entry point
    "AnalysisComponent",
    "parse_ticker_list",
    # Input models
    "CreateAnalysisInput",
    "ListAnalysisInput",
    "PublishAnalysisInput",
    "UpdateAnalysisInput",
    # Ports
    "AnalysisRepoPort",
    "CategoryRepoPort",
    "ClockPort",
    "TagRepoPort",
]
