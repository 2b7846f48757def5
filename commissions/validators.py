"""
Input Validation for the Commission Dashboard Engine

Validates records arriving from the store or the API before processing.
Raises ValueError with clear messages for any constraint violations.

Date windows are deliberately not checked: a malformed window just
resolves to an empty or partial result.
"""

from .models import (
    AgentPerformance,
    BranchTarget,
    DashboardInput,
    Tranche,
    Transaction,
)


def _check_month(month: int, what: str) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"{what} month must be between 1 and 12, got: {month}")


class InputValidator:
    """Validates dashboard input according to business rules."""

    def validate(self, input_data: DashboardInput) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        for transaction in input_data.transactions:
            self._validate_transaction(transaction)

        for tranche in input_data.tranches or []:
            self._validate_tranche(tranche)

        for target in input_data.branch_targets:
            self._validate_target(target)

        for record in input_data.agent_performance:
            self._validate_performance(record)

    def validate_replacement(self, transaction_id: str, tranches: list[Tranche]) -> None:
        """Validate a full new installment list for one transaction."""
        if not transaction_id:
            raise ValueError("transaction_id is required to replace tranches")

        for tranche in tranches:
            self._validate_tranche(tranche)
            if tranche.amount < 0:
                raise ValueError(f"Tranche amount cannot be negative, got: {tranche.amount}")

    def _validate_transaction(self, transaction: Transaction) -> None:
        if not transaction.agent or not transaction.agent.strip():
            raise ValueError(f"Transaction agent cannot be empty: {transaction.id}")

        _check_month(transaction.month, "Transaction")

    def _validate_tranche(self, tranche: Tranche) -> None:
        if not tranche.transaction_id:
            raise ValueError(
                f"Tranche transaction_id is required, got: {tranche.transaction_id!r} "
                f"for {tranche.month}/{tranche.year}"
            )

        _check_month(tranche.month, "Tranche")

        # A realized tranche reports 100 whatever is stored, but the stored
        # value must still be a valid percentage.
        if not 0 <= tranche.probability <= 100:
            raise ValueError(f"Tranche probability must be between 0 and 100, got: {tranche.probability}")

    def _validate_target(self, target: BranchTarget) -> None:
        _check_month(target.month, "Branch target")

        if target.planned_amount < 0:
            raise ValueError(f"planned_amount cannot be negative, got: {target.planned_amount}")

    def _validate_performance(self, record: AgentPerformance) -> None:
        if record.month is not None:
            _check_month(record.month, "Agent performance")
