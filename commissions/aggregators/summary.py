"""
Period Totals

Reduces effective tranches (or raw transactions in fallback mode) into
a single set of period totals.
"""

from typing import Iterable

from ..models import EffectiveTranche, PeriodTotals, Transaction


def totals_from_tranches(tranches: Iterable[EffectiveTranche]) -> PeriodTotals:
    """
    Sum a group of effective tranches.

    Transactions are counted once however many installments they
    produced, and so is their property value. Credit is not part of the
    tranche path unless the resolver prorated it.
    """
    totals = PeriodTotals()
    seen: set[str | None] = set()

    for tranche in tranches:
        totals.outcome += tranche.outcome
        totals.commission += tranche.amount
        totals.cost += tranche.proportional_cost
        totals.credit += tranche.proportional_credit
        totals.realized_total += tranche.realized_amount
        totals.forecast_weighted_total += tranche.forecast_weighted_amount
        totals.forecast_full_total += tranche.forecast_full_amount

        if tranche.transaction_id not in seen:
            seen.add(tranche.transaction_id)
            totals.property_value += tranche.transaction.property_value

    totals.transaction_count = len(seen)
    return totals


def totals_from_transactions(transactions: Iterable[Transaction]) -> PeriodTotals:
    """Fallback when no installment data exists: outcome = commission - cost + credit."""
    totals = PeriodTotals()

    for transaction in transactions:
        totals.outcome += transaction.net_commission - transaction.cost + transaction.credit
        totals.commission += transaction.net_commission
        totals.cost += transaction.cost
        totals.credit += transaction.credit
        totals.realized_total += transaction.net_commission
        totals.property_value += transaction.property_value
        totals.transaction_count += 1

    return totals


class SummaryAggregator:
    """Builds the headline totals for a period."""

    def aggregate(self, tranches: list[EffectiveTranche]) -> PeriodTotals:
        return totals_from_tranches(tranches)

    def aggregate_transactions(self, transactions: list[Transaction]) -> PeriodTotals:
        return totals_from_transactions(transactions)
