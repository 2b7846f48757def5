"""
Period-over-Period Trend

Compares a window against the equal-length window right before it.
"""

from decimal import Decimal

from ..models import DateRange, PeriodTotals, PeriodTrend, Tranche, Transaction, TrendDelta
from ..money import HUNDRED, ZERO, percent_of
from ..period import previous_range
from ..resolver import TrancheResolver
from .summary import totals_from_tranches, totals_from_transactions


def format_percent(change: Decimal) -> str:
    """'+12.5%', '-3%', '0%'."""
    if change == ZERO:
        return "0%"
    text = format(change, "+f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"


def format_count(delta: int) -> str:
    return f"{delta:+d}" if delta else "0"


def percent_delta(current: Decimal, previous: Decimal) -> TrendDelta:
    """Percentage change; +100% when there was nothing before and something now."""
    if previous == ZERO:
        change = HUNDRED if current > ZERO else ZERO
    else:
        change = percent_of(current - previous, previous)
    return TrendDelta(current=current, previous=previous, change=change, label=format_percent(change))


def count_delta(current: int, previous: int) -> TrendDelta:
    delta = current - previous
    return TrendDelta(
        current=Decimal(current),
        previous=Decimal(previous),
        change=Decimal(delta),
        label=format_count(delta),
    )


class TrendAnalyzer:
    """Builds period-over-period deltas for the headline figures."""

    def __init__(self, resolver: TrancheResolver | None = None):
        self.resolver = resolver or TrancheResolver()

    def compare(
        self,
        current: PeriodTotals,
        all_transactions: list[Transaction],
        tranches_by_transaction: dict[str, list[Tranche]] | None,
        date_range: DateRange,
    ) -> PeriodTrend:
        """
        Compare ``current`` with the previous window.

        The previous window is resolved from the full, unfiltered
        transaction set. Without tranche data the raw transactions of
        that window are summed instead.
        """
        prior = previous_range(date_range)

        if tranches_by_transaction is None:
            previous = totals_from_transactions(
                t for t in all_transactions if prior.contains(t.month, t.year)
            )
        else:
            previous = totals_from_tranches(
                self.resolver.resolve(all_transactions, tranches_by_transaction, prior)
            )

        return PeriodTrend(
            previous_range=prior,
            outcome=percent_delta(current.outcome, previous.outcome),
            commission=percent_delta(current.commission, previous.commission),
            property_value=percent_delta(current.property_value, previous.property_value),
            transaction_count=count_delta(current.transaction_count, previous.transaction_count),
        )
