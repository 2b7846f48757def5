"""
Branch Breakdown

Groups period totals by office and derives the commission rate.
"""

from ..models import Branch, BranchTotals, EffectiveTranche, PeriodTotals, Transaction
from ..money import percent_of
from .summary import totals_from_tranches, totals_from_transactions


class BranchAggregator:
    """Per-branch totals, always reported for every branch."""

    def aggregate(self, tranches: list[EffectiveTranche]) -> list[BranchTotals]:
        return [
            self._with_rate(branch, totals_from_tranches(t for t in tranches if t.transaction.branch == branch))
            for branch in Branch
        ]

    def aggregate_transactions(self, transactions: list[Transaction]) -> list[BranchTotals]:
        return [
            self._with_rate(branch, totals_from_transactions(t for t in transactions if t.branch == branch))
            for branch in Branch
        ]

    def _with_rate(self, branch: Branch, totals: PeriodTotals) -> BranchTotals:
        """Commission rate = commission / property value, 0 when there is no property value."""
        return BranchTotals(
            branch=branch,
            totals=totals,
            commission_rate=percent_of(totals.commission, totals.property_value),
        )
