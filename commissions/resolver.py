"""
Tranche Resolver

Turns transactions (with or without explicit installments) into the flat
sequence of effective tranches that fall inside a date window.
"""

from decimal import Decimal
from typing import Iterable

from .models import DateRange, EffectiveTranche, Tranche, TrancheStatus, Transaction
from .money import HUNDRED, ZERO, quantize_money, safe_ratio


def index_tranches(tranches: Iterable[Tranche]) -> dict[str, list[Tranche]]:
    """Group tranches by owning transaction id, keeping storage order."""
    index: dict[str, list[Tranche]] = {}
    for tranche in tranches:
        index.setdefault(tranche.transaction_id, []).append(tranche)
    return index


class TrancheResolver:
    """Resolves explicit and implicit installments for a date window."""

    def __init__(self, prorate_credit: bool = False):
        # When False the tranche path reports proportional credit as 0 and
        # leaves it out of the outcome, while the raw transaction path still
        # adds credit.
        self.prorate_credit = prorate_credit

    def resolve(
        self,
        transactions: Iterable[Transaction],
        tranches_by_transaction: dict[str, list[Tranche]],
        date_range: DateRange,
    ) -> list[EffectiveTranche]:
        """
        Resolve every installment inside ``date_range``.

        Transactions without an id are skipped. A transaction without
        tranches yields one implicit realized installment dated by the
        transaction itself; otherwise each of its tranches is tested
        against the window on its own date.
        """
        resolved = []
        for transaction in transactions:
            if transaction.id is None:
                continue

            tranches = tranches_by_transaction.get(transaction.id) or []
            if not tranches:
                if date_range.contains(transaction.month, transaction.year):
                    resolved.append(self._implicit(transaction))
                continue

            for tranche, cost, credit in self._prorated(transaction, tranches):
                if date_range.contains(tranche.month, tranche.year):
                    resolved.append(self._explicit(transaction, tranche, cost, credit))

        return resolved

    def _prorated(self, transaction: Transaction, tranches: list[Tranche]):
        """
        Pair each tranche with its cost and credit share in cents.

        Shares are rounded on the running total, so the installments of one
        transaction add back up to its cost and credit exactly.
        """
        commission = transaction.net_commission
        cumulative = ZERO
        cost_so_far = ZERO
        credit_so_far = ZERO

        for tranche in tranches:
            cumulative += tranche.amount
            cost_to_date = quantize_money(safe_ratio(transaction.cost * cumulative, commission))
            credit_to_date = ZERO
            if self.prorate_credit:
                credit_to_date = quantize_money(safe_ratio(transaction.credit * cumulative, commission))

            yield tranche, cost_to_date - cost_so_far, credit_to_date - credit_so_far
            cost_so_far = cost_to_date
            credit_so_far = credit_to_date

    def _implicit(self, transaction: Transaction) -> EffectiveTranche:
        """The whole commission as a single realized installment."""
        amount = transaction.net_commission
        cost = transaction.cost
        credit = transaction.credit if self.prorate_credit else ZERO

        return EffectiveTranche(
            transaction=transaction,
            month=transaction.month,
            year=transaction.year,
            amount=amount,
            status=TrancheStatus.REALIZED,
            probability=100,
            realized_amount=amount,
            forecast_weighted_amount=ZERO,
            forecast_full_amount=ZERO,
            value_share=Decimal("1"),
            proportional_cost=cost,
            proportional_credit=credit,
            outcome=quantize_money(amount - cost + credit),
            is_implicit=True,
        )

    def _explicit(
        self,
        transaction: Transaction,
        tranche: Tranche,
        proportional_cost: Decimal,
        proportional_credit: Decimal,
    ) -> EffectiveTranche:
        amount = tranche.amount
        probability = tranche.effective_probability
        is_realized = tranche.status == TrancheStatus.REALIZED
        value_share = safe_ratio(amount, transaction.net_commission)

        net = amount - proportional_cost + proportional_credit
        weight = Decimal(probability) / HUNDRED

        return EffectiveTranche(
            transaction=transaction,
            month=tranche.month,
            year=tranche.year,
            amount=amount,
            status=tranche.status,
            probability=probability,
            realized_amount=amount if is_realized else ZERO,
            forecast_weighted_amount=ZERO if is_realized else quantize_money(amount * weight),
            forecast_full_amount=ZERO if is_realized else amount,
            value_share=value_share,
            proportional_cost=proportional_cost,
            proportional_credit=proportional_credit,
            outcome=quantize_money(net if is_realized else net * weight),
        )


def resolve_effective_tranches(
    transactions: Iterable[Transaction],
    tranches_by_transaction: dict[str, list[Tranche]],
    start_month: int,
    end_month: int,
    year: int,
    prorate_credit: bool = False,
) -> list[EffectiveTranche]:
    """Functional form of ``TrancheResolver.resolve``."""
    resolver = TrancheResolver(prorate_credit=prorate_credit)
    return resolver.resolve(transactions, tranches_by_transaction, DateRange(start_month, end_month, year))
