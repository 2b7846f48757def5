"""
Unit Tests for the Period-over-Period Trend
"""

from decimal import Decimal

import pytest

from commissions.aggregators.summary import totals_from_tranches, totals_from_transactions
from commissions.aggregators.trend import TrendAnalyzer, count_delta, format_percent, percent_delta
from commissions.models import Branch, DateRange, Tranche, TrancheStatus, Transaction
from commissions.resolver import TrancheResolver, index_tranches


class TestDeltas:
    """Percentage and count deltas with the zero-previous special case."""

    def test_format_percent(self):
        assert format_percent(Decimal('12.50')) == "+12.5%"
        assert format_percent(Decimal('-3.00')) == "-3%"
        assert format_percent(Decimal('0')) == "0%"

    def test_zero_previous_with_growth_is_plus_hundred(self):
        delta = percent_delta(Decimal('5000'), Decimal('0'))

        assert delta.change == Decimal('100')
        assert delta.label == "+100%"

    def test_zero_previous_and_zero_current(self):
        assert percent_delta(Decimal('0'), Decimal('0')).label == "0%"

    def test_regular_change(self):
        delta = percent_delta(Decimal('11250'), Decimal('10000'))

        assert delta.change == Decimal('12.50')
        assert delta.label == "+12.5%"

    def test_count_delta(self):
        assert count_delta(7, 3).label == "+4"
        assert count_delta(1, 3).label == "-2"
        assert count_delta(2, 2).label == "0"
        assert count_delta(7, 3).change == Decimal('4')


class TestTrendComparison:

    @pytest.fixture
    def analyzer(self):
        return TrendAnalyzer()

    def test_first_quarter_compares_with_prior_year_last_quarter(self, analyzer):
        transactions = [
            _make_transaction("now", month=2, year=2026, commission=9000),
            _make_transaction("before", month=11, year=2025, commission=6000),
            _make_transaction("ignored", month=9, year=2025, commission=50000),
        ]
        current_range = DateRange(1, 3, 2026)
        current = totals_from_tranches(TrancheResolver().resolve(transactions, {}, current_range))

        trend = analyzer.compare(current, transactions, {}, current_range)

        assert trend.previous_range == DateRange(10, 12, 2025)
        assert trend.outcome.previous == Decimal('6000')
        assert trend.outcome.label == "+50%"
        assert trend.transaction_count.label == "0"

    def test_previous_window_uses_tranche_dates(self, analyzer):
        """A deal dated in Q2 with an installment in Q1 counts in Q1."""
        transactions = [_make_transaction("a", month=5, year=2026, commission=8000)]
        index = index_tranches([
            Tranche("a", 2, 2026, Decimal('2000'), TrancheStatus.REALIZED),
            Tranche("a", 5, 2026, Decimal('6000'), TrancheStatus.REALIZED),
        ])
        current_range = DateRange(4, 6, 2026)
        current = totals_from_tranches(TrancheResolver().resolve(transactions, index, current_range))

        trend = analyzer.compare(current, transactions, index, current_range)

        assert trend.outcome.current == Decimal('6000')
        assert trend.outcome.previous == Decimal('2000')
        assert trend.outcome.change == Decimal('200.00')

    def test_fallback_without_tranche_data(self, analyzer):
        transactions = [
            _make_transaction("a", month=4, year=2026, commission=3000),
            _make_transaction("b", month=2, year=2026, commission=1000),
            _make_transaction("c", month=3, year=2026, commission=1000),
        ]
        current_range = DateRange(4, 6, 2026)
        current = totals_from_transactions(t for t in transactions if current_range.contains(t.month, t.year))

        trend = analyzer.compare(current, transactions, None, current_range)

        assert trend.commission.label == "+50%"
        assert trend.transaction_count.label == "-1"


def _make_transaction(tx_id: str, month: int, year: int, commission: float) -> Transaction:
    return Transaction(
        id=tx_id,
        branch=Branch.KRAKOW,
        month=month,
        year=year,
        agent="Anna Nowak",
        net_commission=Decimal(str(commission)),
    )
