"""
Aggregators Package

Provides the pure reductions that turn effective tranches (or raw
transactions) into dashboard views.
"""

from .activity import ActivityAggregator
from .agents import AgentRanker
from .branches import BranchAggregator
from .monthly import MonthlyAggregator
from .plan import PlanComparator
from .summary import SummaryAggregator
from .trend import TrendAnalyzer

__all__ = [
    "SummaryAggregator",
    "BranchAggregator",
    "AgentRanker",
    "MonthlyAggregator",
    "TrendAnalyzer",
    "PlanComparator",
    "ActivityAggregator",
]
