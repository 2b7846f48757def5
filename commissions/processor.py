"""
Dashboard Processor - Main Orchestrator

Coordinates the dashboard pipeline through discrete, testable steps.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from .aggregators import (
    ActivityAggregator,
    AgentRanker,
    BranchAggregator,
    MonthlyAggregator,
    PlanComparator,
    SummaryAggregator,
    TrendAnalyzer,
)
from .models import DashboardInput, DashboardResult, DateRange, ProcessingContext, Tranche, Transaction
from .output import OutputBuilder, to_money
from .period import active_agent_names, active_working_set, available_years, unfiltered_for_year
from .resolver import TrancheResolver, index_tranches
from .tranches import TrancheReplacement, plan_replacement, split_evenly, tranche_gap
from .validators import InputValidator

logger = logging.getLogger(__name__)


class DashboardProcessor:
    """
    Main orchestrator for dashboard processing.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Build Context (tranche index, working set, unfiltered set)
    3. Resolve Effective Tranches
    4. Period Totals
    5. Branch Breakdown
    6. Agent Ranking
    7. Monthly Series
    8. Trend vs Previous Period
    9. Plan vs Actual
    10. Agent Activity
    11. Build Output
    """

    def __init__(self, prorate_credit: bool = False):
        self.validator = InputValidator()
        self.resolver = TrancheResolver(prorate_credit=prorate_credit)
        self.summary_aggregator = SummaryAggregator()
        self.branch_aggregator = BranchAggregator()
        self.agent_ranker = AgentRanker()
        self.monthly_aggregator = MonthlyAggregator()
        self.trend_analyzer = TrendAnalyzer(self.resolver)
        self.plan_comparator = PlanComparator()
        self.activity_aggregator = ActivityAggregator()
        self.output_builder = OutputBuilder()

    def process(self, input_data: DashboardInput) -> DashboardResult:
        """
        Process a dashboard request through the complete pipeline.

        Args:
            input_data: DashboardInput object

        Returns:
            DashboardResult with all views for the requested window
        """
        # Step 1: Validate
        self.validator.validate(input_data)

        # Step 2: Build initial context
        ctx = self._build_context(input_data)
        date_range = ctx.date_range
        # Active agents get a ranking row even without sales
        roster = [a for a in input_data.agents if a.is_active] if input_data.agents is not None else None

        if ctx.fallback_mode:
            logger.debug("No tranche data supplied, aggregating raw transactions")
            ctx.summary = self.summary_aggregator.aggregate_transactions(ctx.working_set)
            ctx.branches = self.branch_aggregator.aggregate_transactions(ctx.working_set)
            ctx.agents = self.agent_ranker.rank_transactions(
                ctx.working_set, roster=roster, branch=input_data.agent_branch
            )
            ctx.monthly = self.monthly_aggregator.aggregate_transactions(ctx.working_set, date_range)
        else:
            # Step 3: Resolve installments of the working set
            ctx.effective = self.resolver.resolve(ctx.working_set, ctx.tranches_by_transaction, date_range)

            # Steps 4-7: Reductions over the same resolved tranches
            ctx.summary = self.summary_aggregator.aggregate(ctx.effective)
            ctx.branches = self.branch_aggregator.aggregate(ctx.effective)
            ctx.agents = self.agent_ranker.rank(ctx.effective, roster=roster, branch=input_data.agent_branch)
            ctx.monthly = self.monthly_aggregator.aggregate(ctx.effective, date_range)

        # Step 8: Trend against the previous window of the full data set
        ctx.trend = self.trend_analyzer.compare(
            ctx.summary, input_data.transactions, ctx.tranches_by_transaction, date_range
        )

        # Step 9: Plan vs actual for the year
        if input_data.branch_targets:
            ctx.plan = self._build_plan(ctx, input_data)

        # Step 10: Agent activity
        if input_data.agent_performance:
            records = [r for r in input_data.agent_performance if r.year == date_range.year]
            ctx.activity = self.activity_aggregator.aggregate(records)

        logger.debug(
            f"Resolved {len(ctx.effective)} installments from {len(ctx.working_set)} transactions"
        )

        # Step 11: Build output
        return self.output_builder.build(ctx)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a dashboard request from raw dictionary input.

        Convenience method for API usage.
        """
        input_data = DashboardInput.from_dict(data)
        result = self.process(input_data)
        return self._result_to_dict(result)

    def replace_tranches(
        self, transaction_id: str, tranches: list[Tranche], previous_commission: Decimal = Decimal("0")
    ) -> TrancheReplacement:
        self.validator.validate_replacement(transaction_id, tranches)
        return plan_replacement(transaction_id, tranches, previous_commission)

    def replace_tranches_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Plan a delete-all/insert-new replace of one transaction's tranches.

        The parent may be sent whole as ``transaction``; its id and stored
        commission then stand in for ``transaction_id`` and
        ``previous_commission``, and the response reports how much of that
        commission the new list left uncovered.
        """
        transaction = Transaction.from_dict(data["transaction"]) if data.get("transaction") else None
        transaction_id = data.get("transaction_id", transaction.id if transaction else None)
        transaction_id = str(transaction_id) if transaction_id is not None else None
        tranches = [
            Tranche.from_dict({**t, "transaction_id": transaction_id}) for t in data.get("tranches", [])
        ]
        if transaction is not None:
            previous = transaction.net_commission
        else:
            previous = Decimal(str(data.get("previous_commission", 0)))

        replacement = self.replace_tranches(transaction_id, tranches, previous)
        output = self.output_builder.build_replacement(replacement)
        if transaction is not None:
            output["uncovered_before_resync"] = to_money(tranche_gap(transaction, replacement.tranches))
        return output

    def split_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Even split of one transaction's commission into installments."""
        transaction = Transaction.from_dict(data["transaction"])
        tranches = split_evenly(transaction, int(data.get("count", 3)))
        return {
            "transaction_id": transaction.id,
            "tranches": [self.output_builder.tranche_to_dict(t) for t in tranches],
        }

    def _build_context(self, input_data: DashboardInput) -> ProcessingContext:
        """Build the initial processing context."""
        date_range = input_data.date_range
        fallback_mode = input_data.tranches is None
        index = index_tranches(input_data.tranches) if not fallback_mode else None

        if input_data.agents is None:
            active = {t.agent for t in input_data.transactions}
        else:
            active = active_agent_names(input_data.agents)

        return ProcessingContext(
            date_range=date_range,
            working_set=active_working_set(input_data.transactions, index or {}, date_range, active),
            unfiltered=unfiltered_for_year(input_data.transactions, date_range.year),
            tranches_by_transaction=index,
            fallback_mode=fallback_mode,
            available_years=available_years(
                input_data.transactions, input_data.current_year or date.today().year
            ),
        )

    def _build_plan(self, ctx: ProcessingContext, input_data: DashboardInput):
        """Plan vs actual over the whole year, agents of any status."""
        year = ctx.date_range.year
        if ctx.fallback_mode:
            actuals = self.plan_comparator.actuals_from_transactions(ctx.unfiltered)
        else:
            year_range = DateRange(1, 12, year)
            # Installments of last year's deals can land in this year
            effective = self.resolver.resolve(input_data.transactions, ctx.tranches_by_transaction, year_range)
            actuals = self.plan_comparator.actuals(effective)

        return self.plan_comparator.report(
            year, input_data.branch_targets, actuals, up_to_month=ctx.date_range.end_month
        )

    def _result_to_dict(self, result: DashboardResult) -> Dict[str, Any]:
        """Convert DashboardResult to dictionary for API response."""
        output = {
            "date_range": result.date_range,
            "mode": result.mode,
            "summary": result.summary,
            "trend": result.trend,
            "branches": result.branches,
            "agents": result.agents,
            "monthly": result.monthly,
            "available_years": result.available_years,
        }
        if result.plan_vs_actual:
            output["plan_vs_actual"] = result.plan_vs_actual
        if result.activity:
            output["activity"] = result.activity
        return output


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def process_dashboard_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Process a dashboard request from Python dict and return Python dict.
    """
    processor = DashboardProcessor()
    return processor.process_from_dict(input_data)


def process_dashboard_from_json(json_input: str) -> str:
    """
    Process a dashboard request from JSON string input and return JSON string output.
    """
    import json

    try:
        input_data = json.loads(json_input)
        processor = DashboardProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
