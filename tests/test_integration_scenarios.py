"""
Integration Test Scenarios for the Commission Dashboard Engine

These tests cover real-world dashboard situations end to end, from raw
payload to view-ready output.

Run with: python -m pytest tests/test_integration_scenarios.py -v
"""


import pytest

from commissions import DashboardProcessor, is_visible_in_range, resolve_effective_tranches
from commissions.models import Tranche, Transaction
from commissions.resolver import index_tranches


def _transaction(tx_id, branch, month, year, agent, commission, **extra):
    data = {
        "id": tx_id,
        "branch": branch,
        "month": month,
        "year": year,
        "agent": agent,
        "net_commission": commission,
    }
    data.update(extra)
    return data


class TestDealSplitAcrossQuarters:
    """A deal signed in December and paid out over the following year."""

    @pytest.fixture
    def processor(self):
        return DashboardProcessor()

    @pytest.fixture
    def payload(self):
        return {
            "date_range": {"start_month": 1, "end_month": 3, "year": 2026},
            "transactions": [
                _transaction("d1", "Warszawa", 12, 2025, "Piotr Lis", 20000, cost=2000, property_value=800000),
            ],
            "tranches": [
                {"transaction_id": "d1", "month": 12, "year": 2025, "amount": 5000, "status": "realized"},
                {"transaction_id": "d1", "month": 2, "year": 2026, "amount": 10000, "status": "forecast", "probability": 80},
                {"transaction_id": "d1", "month": 7, "year": 2026, "amount": 5000, "status": "forecast", "probability": 20},
            ],
        }

    def test_only_first_quarter_installment_counts(self, processor, payload):
        """(10000 - 1000) × 80% = 7200."""
        summary = processor.process_from_dict(payload)["summary"]

        assert summary["outcome"] == 7200.0
        assert summary["commission"] == 10000.0
        assert summary["cost"] == 1000.0
        assert summary["transaction_count"] == 1
        assert summary["installment_count"] == 1

    def test_december_installment_is_last_quarters_result(self, processor, payload):
        """Previous window Q4 2025 holds the realized 5000 - 500."""
        trend = processor.process_from_dict(payload)["trend"]

        assert trend["outcome"]["previous"] == 4500.0
        assert trend["outcome"]["label"] == "+60%"

    def test_second_half_only_sees_july(self, processor, payload):
        payload["date_range"] = {"start_month": 7, "end_month": 12, "year": 2026}
        result = processor.process_from_dict(payload)

        assert result["summary"]["outcome"] == 900.0
        assert result["monthly"][0]["outcome"] == 900.0
        assert result["monthly"][0]["forecast_weighted_total"] == 1000.0


class TestReplaceThenResolve:
    """Editing installments and resolving the edited deal."""

    def test_resync_then_even_shares(self):
        processor = DashboardProcessor()
        replaced = processor.replace_tranches_from_dict({
            "transaction_id": "r1",
            "previous_commission": 9000,
            "tranches": [
                {"month": 3, "year": 2026, "amount": 5000, "status": "realized"},
                {"month": 4, "year": 2026, "amount": 3000, "status": "forecast", "probability": 50},
            ],
        })
        assert replaced["resynced_commission"] == 8000.0

        result = processor.process_from_dict({
            "date_range": {"start_month": 1, "end_month": 12, "year": 2026},
            "transactions": [
                _transaction("r1", "Kraków", 3, 2026, "Anna Nowak", replaced["resynced_commission"], cost=800),
            ],
            "tranches": replaced["tranches"],
        })

        # 5000 - 500 + (3000 - 300) × 50%
        assert result["summary"]["outcome"] == 5850.0
        assert result["summary"]["cost"] == 800.0


class TestPublicFunctions:
    """The functional surface used by callers that fetch data themselves."""

    def test_resolve_and_visibility_agree(self):
        tx = Transaction.from_dict(_transaction("v1", "Olsztyn", 5, 2026, "Ewa Kot", 6000))
        tranches = [
            Tranche.from_dict({"transaction_id": "v1", "month": 8, "year": 2026, "amount": 6000, "status": "forecast", "probability": 50}),
        ]

        assert not is_visible_in_range(tx, tranches, 5, 5, 2026)
        assert is_visible_in_range(tx, tranches, 7, 9, 2026)
        assert resolve_effective_tranches([tx], index_tranches(tranches), 5, 5, 2026) == []
        assert len(resolve_effective_tranches([tx], index_tranches(tranches), 7, 9, 2026)) == 1
