"""
Monthly Series

One row per month of the window, empty months included.
"""

from ..models import DateRange, EffectiveTranche, MonthTotals, Transaction
from ..money import ZERO, percent_of


class MonthlyAggregator:
    """Builds the month-by-month report series."""

    def aggregate(self, tranches: list[EffectiveTranche], date_range: DateRange) -> list[MonthTotals]:
        rows = {month: MonthTotals(month=month) for month in date_range.months()}
        seen: dict[int, set] = {month: set() for month in rows}

        for tranche in tranches:
            row = rows.get(tranche.month)
            if row is None or tranche.year != date_range.year:
                continue
            row.outcome += tranche.outcome
            row.realized_total += tranche.realized_amount
            row.forecast_weighted_total += tranche.forecast_weighted_amount
            row.commission += tranche.amount
            # Property value counts once per transaction per month
            if tranche.transaction_id not in seen[tranche.month]:
                seen[tranche.month].add(tranche.transaction_id)
                row.property_value += tranche.transaction.property_value

        for month, row in rows.items():
            row.transaction_count = len(seen[month])

        return self._with_growth(list(rows.values()))

    def aggregate_transactions(self, transactions: list[Transaction], date_range: DateRange) -> list[MonthTotals]:
        rows = {month: MonthTotals(month=month) for month in date_range.months()}

        for transaction in transactions:
            if not date_range.contains(transaction.month, transaction.year):
                continue
            row = rows[transaction.month]
            row.outcome += transaction.net_commission - transaction.cost + transaction.credit
            row.realized_total += transaction.net_commission
            row.commission += transaction.net_commission
            row.property_value += transaction.property_value
            row.transaction_count += 1

        return self._with_growth(list(rows.values()))

    def _with_growth(self, rows: list[MonthTotals]) -> list[MonthTotals]:
        previous = None
        for row in rows:
            if previous is not None and previous.commission != ZERO:
                row.commission_growth = percent_of(row.commission - previous.commission, previous.commission)
            previous = row
        return rows
