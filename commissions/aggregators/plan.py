"""
Plan vs Actual

Pairs externally supplied branch targets with the realized outcome of
the same branch and month.
"""

from decimal import Decimal

from ..models import (
    Branch,
    BranchPlanSummary,
    BranchTarget,
    EffectiveTranche,
    PlanActual,
    PlanReport,
    Transaction,
)
from ..money import ZERO, percent_of


def realization_percent(actual: Decimal, planned: Decimal) -> Decimal:
    """actual / plan * 100, or 0 when there is no plan."""
    if planned <= ZERO:
        return ZERO
    return percent_of(actual, planned)


class PlanComparator:
    """Compares branch targets with realized results."""

    def actuals(self, tranches: list[EffectiveTranche]) -> dict[tuple[Branch, int, int], Decimal]:
        """Realized outcome per (branch, year, month). Forecasts never count."""
        result: dict[tuple[Branch, int, int], Decimal] = {}
        for tranche in tranches:
            if not tranche.is_realized:
                continue
            key = (tranche.transaction.branch, tranche.year, tranche.month)
            result[key] = result.get(key, ZERO) + tranche.outcome
        return result

    def actuals_from_transactions(self, transactions: list[Transaction]) -> dict[tuple[Branch, int, int], Decimal]:
        result: dict[tuple[Branch, int, int], Decimal] = {}
        for transaction in transactions:
            key = (transaction.branch, transaction.year, transaction.month)
            outcome = transaction.net_commission - transaction.cost + transaction.credit
            result[key] = result.get(key, ZERO) + outcome
        return result

    def compare(
        self,
        branch: Branch,
        year: int,
        month: int,
        targets: list[BranchTarget],
        actuals: dict[tuple[Branch, int, int], Decimal],
    ) -> PlanActual:
        planned = sum(
            (t.planned_amount for t in targets if t.branch == branch and t.year == year and t.month == month),
            ZERO,
        )
        actual = actuals.get((branch, year, month), ZERO)
        return PlanActual(
            branch=branch,
            month=month,
            planned=planned,
            actual=actual,
            realization_percent=realization_percent(actual, planned),
        )

    def report(
        self,
        year: int,
        targets: list[BranchTarget],
        actuals: dict[tuple[Branch, int, int], Decimal],
        up_to_month: int = 12,
    ) -> PlanReport:
        """Full-year report per branch with year-to-date and grand totals."""
        report = PlanReport(year=year, up_to_month=up_to_month)

        for branch in Branch:
            summary = BranchPlanSummary(branch=branch)
            for month in range(1, 13):
                row = self.compare(branch, year, month, targets, actuals)
                summary.months.append(row)
                summary.planned_year += row.planned
                summary.actual_year += row.actual
                if month <= up_to_month:
                    summary.planned_to_date += row.planned
                    summary.actual_to_date += row.actual
            summary.realization_to_date = realization_percent(summary.actual_to_date, summary.planned_to_date)

            report.branches.append(summary)
            report.planned_total += summary.planned_to_date
            report.actual_total += summary.actual_to_date

        report.realization_percent = realization_percent(report.actual_total, report.planned_total)
        return report
