"""
Unit Tests for the Branch Breakdown
"""

from decimal import Decimal

import pytest

from commissions.aggregators.branches import BranchAggregator
from commissions.models import Branch, DateRange, Tranche, TrancheStatus, Transaction
from commissions.resolver import TrancheResolver, index_tranches


class TestBranchTotals:

    @pytest.fixture
    def aggregator(self):
        return BranchAggregator()

    def test_every_branch_reported(self, aggregator):
        result = aggregator.aggregate([])

        assert [b.branch for b in result] == [Branch.KRAKOW, Branch.WARSZAWA, Branch.OLSZTYN]
        assert all(b.totals.transaction_count == 0 for b in result)

    def test_commission_rate(self, aggregator):
        """12000 on a 400000 property = 3%."""
        tx = _make_transaction("a", Branch.KRAKOW, commission=12000, property_value=400000)
        effective = TrancheResolver().resolve([tx], {}, DateRange(1, 12, 2026))

        krakow = aggregator.aggregate(effective)[0]
        assert krakow.totals.commission == Decimal('12000')
        assert krakow.commission_rate == Decimal('3.00')

    def test_zero_property_value_gives_zero_rate(self, aggregator):
        tx = _make_transaction("a", Branch.OLSZTYN, commission=8000, property_value=0)
        effective = TrancheResolver().resolve([tx], {}, DateRange(1, 12, 2026))

        olsztyn = aggregator.aggregate(effective)[2]
        assert olsztyn.commission_rate == Decimal('0')

    def test_property_value_counted_once_per_transaction(self, aggregator):
        tx = _make_transaction("a", Branch.WARSZAWA, commission=9000, property_value=300000)
        index = index_tranches([
            Tranche("a", 1, 2026, Decimal('3000'), TrancheStatus.REALIZED),
            Tranche("a", 2, 2026, Decimal('3000'), TrancheStatus.FORECAST, probability=50),
            Tranche("a", 3, 2026, Decimal('3000'), TrancheStatus.FORECAST, probability=50),
        ])
        effective = TrancheResolver().resolve([tx], index, DateRange(1, 3, 2026))

        warszawa = aggregator.aggregate(effective)[1]
        assert warszawa.totals.property_value == Decimal('300000')
        assert warszawa.totals.transaction_count == 1
        assert warszawa.totals.outcome == Decimal('6000')

    def test_fallback_groups_raw_transactions(self, aggregator):
        transactions = [
            _make_transaction("a", Branch.KRAKOW, commission=10000, property_value=500000, credit=200),
            _make_transaction("b", Branch.KRAKOW, commission=5000, property_value=0),
            _make_transaction("c", Branch.OLSZTYN, commission=2000, property_value=100000),
        ]
        result = aggregator.aggregate_transactions(transactions)

        assert result[0].totals.outcome == Decimal('15200')
        assert result[0].totals.transaction_count == 2
        assert result[0].commission_rate == Decimal('3.00')
        assert result[1].totals.transaction_count == 0
        assert result[2].commission_rate == Decimal('2.00')


def _make_transaction(
    tx_id: str,
    branch: Branch,
    commission: float,
    property_value: float,
    credit: float = 0,
) -> Transaction:
    return Transaction(
        id=tx_id,
        branch=branch,
        month=1,
        year=2026,
        agent="Anna Nowak",
        net_commission=Decimal(str(commission)),
        property_value=Decimal(str(property_value)),
        credit=Decimal(str(credit)),
    )
