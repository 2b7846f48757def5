"""
Output Builder

Constructs the final API response from processing context.
"""

from decimal import Decimal

from .models import (
    ActivityReport,
    AgentTotals,
    BranchTotals,
    DashboardResult,
    MonthTotals,
    PeriodTotals,
    PeriodTrend,
    PlanActual,
    PlanReport,
    ProcessingContext,
    Tranche,
    TrendDelta,
)
from .money import gross_from_net
from .tranches import TrancheReplacement


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def to_percent(value: Decimal) -> float:
    return round(float(value), 2)


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: ProcessingContext) -> DashboardResult:
        """Construct the complete dashboard result from processing context."""
        date_range = ctx.date_range
        return DashboardResult(
            date_range={
                "start_month": date_range.start_month,
                "end_month": date_range.end_month,
                "year": date_range.year,
            },
            mode="transactions" if ctx.fallback_mode else "tranches",
            summary=self._build_summary(ctx),
            trend=self._build_trend(ctx.trend),
            branches=[self._build_branch(b) for b in ctx.branches],
            agents=[self._build_agent(a) for a in ctx.agents],
            monthly=[self._build_month(m) for m in ctx.monthly],
            available_years=list(ctx.available_years),
            plan_vs_actual=self._build_plan(ctx.plan) if ctx.plan else None,
            activity=self._build_activity(ctx.activity) if ctx.activity else None,
        )

    def _build_summary(self, ctx: ProcessingContext) -> dict:
        summary = self._totals(ctx.summary)
        summary["installment_count"] = len(ctx.effective)
        summary["unfiltered_transaction_count"] = len(ctx.unfiltered)
        return summary

    def _totals(self, totals: PeriodTotals) -> dict:
        return {
            "outcome": to_money(totals.outcome),
            "outcome_gross": to_money(gross_from_net(totals.outcome)),
            "commission": to_money(totals.commission),
            "cost": to_money(totals.cost),
            "credit": to_money(totals.credit),
            "realized_total": to_money(totals.realized_total),
            "forecast_weighted_total": to_money(totals.forecast_weighted_total),
            "forecast_full_total": to_money(totals.forecast_full_total),
            "property_value": to_money(totals.property_value),
            "transaction_count": totals.transaction_count,
            "average_commission": to_money(totals.average_commission),
        }

    def _build_trend(self, trend: PeriodTrend | None) -> dict:
        if trend is None:
            return {}
        prior = trend.previous_range
        return {
            "previous_range": {
                "start_month": prior.start_month,
                "end_month": prior.end_month,
                "year": prior.year,
            },
            "outcome": self._delta(trend.outcome),
            "commission": self._delta(trend.commission),
            "property_value": self._delta(trend.property_value),
            "transaction_count": {
                "current": int(trend.transaction_count.current),
                "previous": int(trend.transaction_count.previous),
                "change": int(trend.transaction_count.change),
                "label": trend.transaction_count.label,
            },
        }

    def _delta(self, delta: TrendDelta) -> dict:
        return {
            "current": to_money(delta.current),
            "previous": to_money(delta.previous),
            "change_percent": to_percent(delta.change),
            "label": delta.label,
        }

    def _build_branch(self, branch: BranchTotals) -> dict:
        row = {"branch": branch.branch.value}
        row.update(self._totals(branch.totals))
        row["commission_rate"] = to_percent(branch.commission_rate)
        return row

    def _build_agent(self, agent: AgentTotals) -> dict:
        return {
            "rank": agent.rank,
            "agent": agent.agent,
            "branch": agent.branch.value if agent.branch else None,
            "outcome": to_money(agent.outcome),
            "commission": to_money(agent.commission),
            "transaction_count": agent.transaction_count,
        }

    def _build_month(self, month: MonthTotals) -> dict:
        return {
            "month": month.month,
            "outcome": to_money(month.outcome),
            "realized_total": to_money(month.realized_total),
            "forecast_weighted_total": to_money(month.forecast_weighted_total),
            "commission": to_money(month.commission),
            "property_value": to_money(month.property_value),
            "transaction_count": month.transaction_count,
            "commission_growth": to_percent(month.commission_growth),
        }

    def _build_plan(self, plan: PlanReport) -> dict:
        return {
            "year": plan.year,
            "up_to_month": plan.up_to_month,
            "planned_total": to_money(plan.planned_total),
            "actual_total": to_money(plan.actual_total),
            "realization_percent": to_percent(plan.realization_percent),
            "branches": [
                {
                    "branch": summary.branch.value,
                    "planned_to_date": to_money(summary.planned_to_date),
                    "actual_to_date": to_money(summary.actual_to_date),
                    "realization_to_date": to_percent(summary.realization_to_date),
                    "planned_year": to_money(summary.planned_year),
                    "actual_year": to_money(summary.actual_year),
                    "months": [self._plan_row(row) for row in summary.months],
                }
                for summary in plan.branches
            ],
        }

    def _plan_row(self, row: PlanActual) -> dict:
        return {
            "month": row.month,
            "planned": to_money(row.planned),
            "actual": to_money(row.actual),
            "realization_percent": to_percent(row.realization_percent),
        }

    def _build_activity(self, activity: ActivityReport) -> dict:
        return {
            "branches": [
                {
                    "branch": b.branch.value,
                    "agent_count": b.agent_count,
                    "commission_with_credit": to_money(b.commission_with_credit),
                    "acquisition_meetings": b.acquisition_meetings,
                    "new_contracts": b.new_contracts,
                    "presentations": b.presentations,
                    "total_properties": b.total_properties,
                }
                for b in activity.branches
            ],
            "top_agents": [
                {
                    "agent_name": r.agent_name,
                    "branch": r.branch.value,
                    "commission_with_credit": to_money(r.commission_with_credit),
                    "new_contracts": r.new_contracts,
                }
                for r in activity.top_agents
            ],
        }

    def tranche_to_dict(self, tranche: Tranche) -> dict:
        return {
            "transaction_id": tranche.transaction_id,
            "month": tranche.month,
            "year": tranche.year,
            "amount": to_money(tranche.amount),
            "status": tranche.status.value,
            "probability": tranche.probability,
            "note": tranche.note,
        }

    def build_replacement(self, replacement: TrancheReplacement) -> dict:
        return {
            "transaction_id": replacement.transaction_id,
            "tranches": [self.tranche_to_dict(t) for t in replacement.tranches],
            "previous_commission": to_money(replacement.previous_commission),
            "resynced_commission": to_money(replacement.resynced_commission),
            "commission_delta": to_money(replacement.commission_delta),
        }
