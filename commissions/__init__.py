"""
COMMISSION DASHBOARD ENGINE
Tranche resolution and proration for brokerage commission reporting
"""

from .models import DashboardInput, DashboardResult, EffectiveTranche
from .period import is_visible_in_range
from .processor import DashboardProcessor
from .resolver import resolve_effective_tranches

__all__ = [
    'DashboardProcessor',
    'DashboardInput',
    'DashboardResult',
    'EffectiveTranche',
    'resolve_effective_tranches',
    'is_visible_in_range',
]
