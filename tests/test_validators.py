"""
Unit Tests for Input Validation
"""

from decimal import Decimal

import pytest

from commissions import DashboardProcessor
from commissions.models import (
    AgentPerformance,
    Branch,
    BranchTarget,
    DashboardInput,
    DateRange,
    Tranche,
    TrancheStatus,
    Transaction,
)
from commissions.validators import InputValidator


class TestInputValidator:

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_valid_input_passes(self, validator):
        validator.validate(_make_input())

    def test_malformed_window_is_not_rejected(self, validator):
        validator.validate(_make_input(date_range=DateRange(9, 2, 2026)))

    def test_transaction_month_out_of_bounds(self, validator):
        with pytest.raises(ValueError, match="Transaction month"):
            validator.validate(_make_input(transaction=_make_transaction(month=13)))

    def test_empty_agent(self, validator):
        with pytest.raises(ValueError, match="agent cannot be empty"):
            validator.validate(_make_input(transaction=_make_transaction(agent="  ")))

    def test_probability_out_of_bounds(self, validator):
        with pytest.raises(ValueError, match="probability"):
            validator.validate(_make_input(tranche=_make_tranche(probability=150)))

    def test_tranche_month_out_of_bounds(self, validator):
        with pytest.raises(ValueError, match="Tranche month"):
            validator.validate(_make_input(tranche=_make_tranche(month=0)))

    def test_tranche_without_transaction_id(self, validator):
        orphan = Tranche.from_dict({"transaction_id": None, "month": 2, "year": 2026, "amount": 500})

        assert orphan.transaction_id is None
        with pytest.raises(ValueError, match="Tranche transaction_id is required"):
            validator.validate(_make_input(tranche=orphan))

    def test_tranche_with_empty_transaction_id(self, validator):
        orphan = Tranche.from_dict({"transaction_id": "", "month": 2, "year": 2026, "amount": 500})

        with pytest.raises(ValueError, match="Tranche transaction_id is required"):
            validator.validate(_make_input(tranche=orphan))

    def test_negative_plan(self, validator):
        data = _make_input()
        data.branch_targets = [BranchTarget(Branch.KRAKOW, 2026, 1, Decimal('-1'))]
        with pytest.raises(ValueError, match="planned_amount"):
            validator.validate(data)

    def test_performance_month(self, validator):
        data = _make_input()
        data.agent_performance = [AgentPerformance("Anna Nowak", Branch.KRAKOW, 2026, month=14)]
        with pytest.raises(ValueError, match="Agent performance month"):
            validator.validate(data)


class TestReplacementValidation:

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_negative_amount(self, validator):
        with pytest.raises(ValueError, match="cannot be negative"):
            validator.validate_replacement("t1", [_make_tranche(amount=-5)])

    def test_missing_transaction_id(self, validator):
        with pytest.raises(ValueError, match="transaction_id is required"):
            validator.validate_replacement("", [])

    def test_missing_transaction_id_in_payload(self):
        with pytest.raises(ValueError, match="transaction_id is required"):
            DashboardProcessor().replace_tranches_from_dict({
                "tranches": [{"month": 1, "year": 2026, "amount": 500, "status": "realized"}],
            })


def _make_transaction(month: int = 1, agent: str = "Anna Nowak") -> Transaction:
    return Transaction(
        id="t1",
        branch=Branch.KRAKOW,
        month=month,
        year=2026,
        agent=agent,
        net_commission=Decimal('1000'),
    )


def _make_tranche(month: int = 1, probability: int = 50, amount: float = 500) -> Tranche:
    return Tranche(
        transaction_id="t1",
        month=month,
        year=2026,
        amount=Decimal(str(amount)),
        status=TrancheStatus.FORECAST,
        probability=probability,
    )


def _make_input(
    transaction: Transaction | None = None,
    tranche: Tranche | None = None,
    date_range: DateRange | None = None,
) -> DashboardInput:
    return DashboardInput(
        date_range=date_range or DateRange(1, 3, 2026),
        transactions=[transaction or _make_transaction()],
        tranches=[tranche or _make_tranche()],
    )
